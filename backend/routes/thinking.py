"""Thinking-mode toggle: HTML control page plus ?mode=on|off switch."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from chatforge.generate.mode import ThinkingMode
from chatforge.jobs.service import JobService, get_job_service
from chatforge.schemas.api_schemas import ThinkingModeError

logger = logging.getLogger(__name__)
router = APIRouter()


TOGGLE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8"/>
<meta name="viewport" content="width=device-width, initial-scale=1.0"/>
<title>Thinking Mode Toggle</title>
<style>
body {{ font-family: system-ui, sans-serif; max-width: 500px; margin: 3rem auto; padding: 1rem; text-align: center; }}
.status {{ margin: 2rem 0; padding: 1.25rem; border-radius: 12px; border: 2px solid; }}
.status.on {{ background: #e3f2fd; color: #1976d2; }}
.status.off {{ background: #fff3e0; color: #f57c00; }}
.buttons {{ display: flex; gap: 1rem; }}
.btn {{ flex: 1; padding: 1rem; border-radius: 10px; color: white; text-decoration: none; background: #667eea; }}
.btn.off {{ background: #f5576c; }}
.btn.active {{ opacity: 0.6; pointer-events: none; }}
.info {{ margin-top: 2rem; padding: 1rem; background: #f5f5f5; border-radius: 10px; text-align: left; color: #666; }}
</style>
</head>
<body>
<h1>Thinking Mode Control</h1>
<div class="status {mode}">
<strong>Thinking Mode: {mode_upper}</strong>
<p>{description}</p>
</div>
<div class="buttons">
<a href="/thinking?mode=on" class="btn {on_active}">Turn ON</a>
<a href="/thinking?mode=off" class="btn off {off_active}">Turn OFF</a>
</div>
<div class="info">
<strong>How it works:</strong><br/>
ON: the model shows its thinking process (slower, more detailed)<br/>
OFF: the Skip Thinking button is clicked automatically (faster)<br/>
The button is searched for {skip_seconds} seconds after the prompt is sent.
</div>
</body>
</html>
"""


def render_toggle_page(mode: ThinkingMode, skip_seconds: int = 20) -> str:
    if mode is ThinkingMode.ON:
        description = "Skip button will NOT be clicked automatically"
    else:
        description = f"Skip button will be clicked automatically within {skip_seconds} seconds"
    return TOGGLE_PAGE.format(
        mode=mode.value,
        mode_upper=mode.value.upper(),
        description=description,
        on_active="active" if mode is ThinkingMode.ON else "",
        off_active="active" if mode is ThinkingMode.OFF else "",
        skip_seconds=skip_seconds,
    )


@router.get("/thinking", summary="Show or set thinking mode")
async def thinking(
    mode: Optional[str] = None,
    service: JobService = Depends(get_job_service),
):
    if not mode:
        skip_seconds = service.skip_timeout_ms // 1000
        return HTMLResponse(render_toggle_page(service.thinking_mode, skip_seconds))

    try:
        service.set_thinking_mode(mode)
    except ValueError:
        body = ThinkingModeError(current_mode=service.thinking_mode.value)
        return JSONResponse(content=body.model_dump(by_alias=True), status_code=400)

    return RedirectResponse(url="/thinking", status_code=303)
