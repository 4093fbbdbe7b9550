"""Infrastructure tools — runtime configuration on a FastMCP sub-server."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import MODEL_PRESETS, get_config, update_config
from ..errors import make_tool_error
from ..session import session_store
from ..tracing import trace
from ..types import ModelPreset, ThinkingLevel

infra_server = FastMCP("infra")


def _redacted_config() -> dict:
    """Return runtime config without the API key."""
    return get_config().model_dump(exclude={"gemini_api_key"})


@infra_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
@trace(name="infra_configure", span_type="TOOL")
async def infra_configure(
    preset: Annotated[ModelPreset | None, Field(
        description='Named model preset: "quality" (3.1 Pro) or "fast" (3 Flash)',
    )] = None,
    model: Annotated[str | None, Field(description="Gemini model ID override (takes precedence over preset)")] = None,
    thinking_level: ThinkingLevel | None = None,
    temperature: Annotated[float | None, Field(ge=0.0, le=2.0, description="Sampling temperature")] = None,
) -> dict:
    """Reconfigure the analysis model at runtime — preset, model, thinking level, or temperature.

    Changes apply to every analysis submitted afterwards; calling with no
    arguments just reports the current config.

    Returns:
        Dict with current_config, active_preset, available_presets and active_sessions.
    """
    try:
        overrides: dict[str, object] = {}
        if preset is not None:
            if preset not in MODEL_PRESETS:
                valid = ", ".join(sorted(MODEL_PRESETS))
                raise ValueError(f"Unknown preset '{preset}'. Available: {valid}")
            overrides["default_model"] = MODEL_PRESETS[preset]["default_model"]
        # Explicit model overrides preset
        if model is not None:
            overrides["default_model"] = model
        if thinking_level is not None:
            overrides["default_thinking_level"] = thinking_level
        if temperature is not None:
            overrides["default_temperature"] = temperature

        cfg = update_config(**overrides) if overrides else get_config()
        active = next(
            (name for name, p in MODEL_PRESETS.items() if p["default_model"] == cfg.default_model),
            None,
        )
        return {
            "current_config": _redacted_config(),
            "active_preset": active,
            "available_presets": {k: v["label"] for k, v in MODEL_PRESETS.items()},
            "active_sessions": session_store.count,
        }
    except Exception as exc:
        return make_tool_error(exc)
