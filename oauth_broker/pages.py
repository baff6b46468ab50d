"""
HTML documents returned by the callback: the postMessage success page and the shared failure page.
"""
import html
import json

# Delay before the popup closes itself after posting the token (ms)
AUTO_CLOSE_DELAY_MS = 2000

_BASE_STYLE = """
    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      display: flex;
      align-items: center;
      justify-content: center;
      height: 100vh;
      margin: 0;
      background: {background};
    }}
    .container {{
      text-align: center;
      background: white;
      padding: 2rem;
      border-radius: 10px;
      box-shadow: 0 10px 40px rgba(0,0,0,0.1);
    }}
    .icon {{ width: 60px; height: 60px; margin: 0 auto 1rem; color: {accent}; }}
    h1 {{ color: #1f2937; margin: 0 0 0.5rem; }}
    p {{ color: #6b7280; margin: 0 0 1rem; }}
    button {{
      background: #3b82f6;
      color: white;
      border: none;
      padding: 0.75rem 1.5rem;
      border-radius: 6px;
      font-size: 1rem;
      cursor: pointer;
    }}
    button:hover {{ background: #2563eb; }}
"""

_SUCCESS_ICON = """<svg class="icon" viewBox="0 0 24 24">
      <path d="M9 11l3 3L22 4" stroke="currentColor" stroke-width="2" fill="none" stroke-linecap="round" stroke-linejoin="round"/>
      <path d="M21 12v7a2 2 0 01-2 2H5a2 2 0 01-2-2V5a2 2 0 012-2h11" stroke="currentColor" stroke-width="2" fill="none" stroke-linecap="round" stroke-linejoin="round"/>
    </svg>"""

_ERROR_ICON = """<svg class="icon" viewBox="0 0 24 24">
      <circle cx="12" cy="12" r="10" stroke="currentColor" stroke-width="2" fill="none"/>
      <path d="M12 8v4m0 4h.01" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round"/>
    </svg>"""


def _script_literal(value: str) -> str:
    """JSON string literal safe to place inside a <script> element."""
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def success_page(access_token: str, frontend_origin: str) -> str:
    """
    Page that posts {source: "oauth", access_token} to window.opener, targeted at
    frontend_origin only, then closes itself.
    """
    token_js = _script_literal(access_token)
    origin_js = _script_literal(frontend_origin)
    style = _BASE_STYLE.format(background="linear-gradient(135deg, #667eea 0%, #764ba2 100%)", accent="#10b981")
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>OAuth Success</title>
  <style>{style}</style>
</head>
<body>
  <div class="container">
    {_SUCCESS_ICON}
    <h1>Authentication Successful!</h1>
    <p>You can now close this window.</p>
  </div>
  <script>
    if (window.opener) {{
      window.opener.postMessage({{ source: "oauth", access_token: {token_js} }}, {origin_js});
    }}
    setTimeout(function () {{ window.close(); }}, {AUTO_CLOSE_DELAY_MS});
  </script>
</body>
</html>"""


def error_page(message: str, title: str = "Authentication Failed") -> str:
    """Failure page: title, escaped message, close button."""
    style = _BASE_STYLE.format(background="#f3f4f6", accent="#ef4444")
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>OAuth Error</title>
  <style>{style}</style>
</head>
<body>
  <div class="container">
    {_ERROR_ICON}
    <h1>{html.escape(title)}</h1>
    <p>{html.escape(message)}</p>
    <button onclick="window.close()">Close Window</button>
  </div>
</body>
</html>"""
