"""Render session layer — browser automation behind a common protocol.

The Playwright implementation lives in ``chatforge.session.playwright_session`` and is
imported on demand so the engine can be used without a browser installed.
"""

from chatforge.session.base import SKIP_CONTROL, ControlDescriptor, RenderSession, SessionFactory

__all__ = ["SKIP_CONTROL", "ControlDescriptor", "RenderSession", "SessionFactory"]
