"""
Built-in HTML used by the test endpoint.
"""

from datetime import datetime, timezone
from typing import Optional

SAMPLE_HTML_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Test PDF</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        h1 {{ color: #333; }}
        p {{ line-height: 1.6; }}
        .highlight {{ background-color: yellow; }}
    </style>
</head>
<body>
    <h1>Test PDF Document</h1>
    <p>This is a <span class="highlight">test PDF</span> generated from HTML content.</p>
    <p>Current time: {timestamp}</p>
    <ul>
        <li>First item</li>
        <li>Second item</li>
        <li>Third item</li>
    </ul>
</body>
</html>
"""


def build_sample_html(now: Optional[datetime] = None) -> str:
    """
    Build the sample document rendered by GET /test-pdf.

    Args:
        now: Timestamp to print in the document; defaults to the current UTC time

    Returns:
        Complete HTML document string
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return SAMPLE_HTML_TEMPLATE.format(timestamp=timestamp)
