import html


def escape_html(text) -> str:
    return html.escape(str(text if text is not None else ""), quote=True)


def format_number(num) -> str:
    """1234567 -> '1,234,567'. Non-numeric values are shown as they are."""
    if num is None:
        return "0"
    try:
        return f"{int(num):,}"
    except (TypeError, ValueError):
        return str(num)
