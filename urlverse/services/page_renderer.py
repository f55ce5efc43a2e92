"""
Page Renderer - Server-rendered HTML around generated content.

Renders:
- Generated pages (complete documents pass through, fragments get a shell)
- Flavor-styled error pages
- The home page with URL input, flavor selector and API key settings

Every visitor- or model-supplied string interpolated here is escaped.
"""

import html as html_escape
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from urlverse.ai.flavors import FlavorRegistry, flavor_registry
from urlverse.ai.providers.base import INVALID_API_KEY
from urlverse.core.config import settings


CREDENTIAL_REJECTED_TEXT = (
    "The Gemini API rejected your API key. Please check the key in the settings."
)


def describe_error(error: str) -> str:
    """Human-readable text for an error message or the sentinel."""
    if error == INVALID_API_KEY:
        return CREDENTIAL_REJECTED_TEXT
    return error


class PageRenderer:
    """
    Renders HTML pages for one flavor.

    Usage:
        renderer = PageRenderer(flavor_id="retro")
        html = renderer.render_error("API rate limit reached.")
    """

    def __init__(
        self,
        flavor_id: Optional[str] = None,
        registry: FlavorRegistry = flavor_registry,
        app_name: Optional[str] = None,
    ):
        self.flavor = registry.get_by_id(flavor_id)
        self.app_name = app_name or settings.APP_NAME

    # -------------------------------------------------------------------------
    # GENERATED PAGES
    # -------------------------------------------------------------------------

    @staticmethod
    def is_full_document(content: str) -> bool:
        return BeautifulSoup(content, "html.parser").find("html") is not None

    def extract_title(self, content: str) -> str:
        """<title>, else the first <h1>, else the app name."""
        soup = BeautifulSoup(content, "html.parser")
        for tag_name in ("title", "h1"):
            tag = soup.find(tag_name)
            if tag is not None:
                text = tag.get_text(" ", strip=True)
                if text:
                    return text
        return self.app_name

    def render_generated(self, content: str) -> str:
        """
        Return a complete HTML document for generated content.

        Complete documents are returned byte-for-byte; fragments are wrapped
        in a minimal HTML5 shell.
        """
        if self.is_full_document(content):
            return content

        title = self.extract_title(content)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html_escape.escape(title)}</title>
</head>
<body>
{content}
</body>
</html>
"""

    # -------------------------------------------------------------------------
    # ERROR PAGES
    # -------------------------------------------------------------------------

    def render_error(self, error_message: str, credential_problem: bool = False) -> str:
        """
        Render an error page in the style of the current flavor.

        Args:
            error_message: Error description (or the INVALID_API_KEY sentinel)
            credential_problem: Add a hint to set the API key

        Returns:
            Complete HTML error page as a string
        """
        safe_message = html_escape.escape(describe_error(error_message))
        hint = ""
        if credential_problem:
            hint = (
                '<p class="error-hint">Set your Gemini API key on the '
                '<a href="/#settings">home page</a>.</p>'
            )

        if self.flavor.id == "cyberpunk":
            body = self._cyberpunk_error(safe_message, hint)
        elif self.flavor.id == "retro":
            body = self._retro_error(safe_message, hint)
        else:
            body = self._default_error(safe_message, hint)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Error - {html_escape.escape(self.app_name)}</title>
</head>
<body style="margin: 0;">
{body}
</body>
</html>
"""

    @staticmethod
    def _default_error(safe_message: str, hint: str) -> str:
        return f"""<div style="padding: 2rem; font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h1 style="color: #e74c3c;">The page could not be loaded</h1>
    <p style="color: #666;">An error occurred:</p>
    <code style="background: #f8f9fa; padding: 1rem; display: block; border-radius: 4px; color: #e74c3c;">{safe_message}</code>
    {hint}
    <p style="margin-top: 2rem;"><a href="/" style="color: #3498db; text-decoration: none;">&larr; Back to the home page</a></p>
</div>"""

    @staticmethod
    def _cyberpunk_error(safe_message: str, hint: str) -> str:
        return f"""<div style="background: #0a0a0a; color: #00ff41; font-family: 'Courier New', monospace; padding: 2rem; min-height: 100vh;">
    <div style="max-width: 600px; margin: 0 auto; border: 1px solid #00ff41; padding: 2rem;">
        <h1 style="color: #ff0080; text-shadow: 0 0 10px #ff0080;">SYSTEM ERROR</h1>
        <p>NEURAL LINK DISCONNECTED:</p>
        <code style="background: #1a1a1a; padding: 1rem; display: block; border: 1px solid #00ff41; color: #ff0080;">{safe_message}</code>
        {hint}
        <p style="margin-top: 2rem;"><a href="/" style="color: #00ff41; text-decoration: none; text-shadow: 0 0 5px #00ff41;">&larr; RETURN TO MAINFRAME</a></p>
    </div>
</div>"""

    @staticmethod
    def _retro_error(safe_message: str, hint: str) -> str:
        return f"""<center>
    <table border="1" cellpadding="10" cellspacing="0" width="80%" style="font-family: 'Times New Roman', serif;">
        <tr bgcolor="#ff0000">
            <td align="center"><font size="4" color="#ffffff"><b>ERROR - SITE NOT FOUND!</b></font></td>
        </tr>
        <tr>
            <td>
                <font size="2">
                    <b>Oops! Something went wrong:</b><br><br>
                    <code>{safe_message}</code><br><br>
                    {hint}
                    <a href="/">Back to Homepage</a>
                </font>
            </td>
        </tr>
    </table>
</center>"""

    # -------------------------------------------------------------------------
    # HOME PAGE
    # -------------------------------------------------------------------------

    def _get_css(self) -> str:
        return """
    * { box-sizing: border-box; }
    body {
        margin: 0;
        min-height: 100vh;
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
        background: linear-gradient(135deg, #1a1a2e 0%, #16213e 100%);
        color: #e0e0e0;
        display: flex;
        align-items: center;
        justify-content: center;
    }
    .homepage { width: 100%; max-width: 640px; padding: 2rem; }
    h1 { font-size: 2.5rem; margin: 0 0 0.5rem; color: #ffffff; }
    .tagline { color: #8a8a9a; margin-bottom: 2rem; }
    form { display: flex; flex-direction: column; gap: 0.75rem; }
    input, select, button {
        font-size: 1rem;
        padding: 0.75rem 1rem;
        border-radius: 8px;
        border: 1px solid #2a2a4a;
        background: #0f0f23;
        color: #e0e0e0;
    }
    button { background: #4f46e5; border: none; cursor: pointer; color: #ffffff; }
    .settings { margin-top: 2.5rem; padding-top: 1.5rem; border-top: 1px solid #2a2a4a; }
    .settings h2 { font-size: 1.1rem; }
    .status { font-size: 0.9rem; color: #8a8a9a; }
    .status--warning { color: #f59e0b; }
    """

    def render_homepage(
        self,
        flavor_options: List[Dict[str, str]],
        selected_flavor: str,
        has_api_key: bool,
    ) -> str:
        """Home page with URL form, flavor selector and API key settings."""
        options = "\n".join(
            f'<option value="{html_escape.escape(option["id"])}"'
            f'{" selected" if option["id"] == selected_flavor else ""}'
            f' title="{html_escape.escape(option["description"])}">'
            f'{html_escape.escape(option["name"])}</option>'
            for option in flavor_options
        )

        if has_api_key:
            key_status = '<p class="status">An API key is configured.</p>'
        else:
            key_status = '<p class="status status--warning">No API key set yet.</p>'

        app_name = html_escape.escape(self.app_name)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{app_name}</title>
    <style>{self._get_css()}</style>
</head>
<body>
    <main class="homepage">
        <h1>{app_name}</h1>
        <p class="tagline">Every URL is a page. Type a path and it will be generated.</p>

        <form action="/go" method="get">
            <input id="urlInput" name="path" type="text" placeholder="Enter a URL, e.g. /blog/my-article" autofocus required>
            <select name="flavor">
{options}
            </select>
            <button type="submit">Generate</button>
        </form>

        <section class="settings" id="settings">
            <h2>Gemini API key</h2>
            {key_status}
            <form id="apiKeyForm">
                <input id="apiKeyInput" type="password" placeholder="AIza..." autocomplete="off">
                <button type="submit">Save key</button>
            </form>
            <p class="status" id="apiKeyMessage"></p>
        </section>
    </main>
    <script>
    document.getElementById('apiKeyForm').addEventListener('submit', async (event) => {{
        event.preventDefault();
        const message = document.getElementById('apiKeyMessage');
        const response = await fetch('/api/settings/api-key', {{
            method: 'PUT',
            headers: {{ 'Content-Type': 'application/json' }},
            body: JSON.stringify({{ api_key: document.getElementById('apiKeyInput').value }}),
        }});
        const data = await response.json();
        message.textContent = data.message || data.detail || '';
    }});
    </script>
</body>
</html>
"""
