"""Assemble a standalone HTML page from a parse result."""

__all__ = ["CONTENT_SECURITY_POLICY", "BASE_STYLESHEET", "render_document"]

import html

from ._render import render, render_error_banner


CONTENT_SECURITY_POLICY = "default-src 'none'; img-src https: data:; style-src 'unsafe-inline'"

BASE_STYLESHEET = """
:root { color-scheme: light; }
body {
  margin: 0; padding: 16px; background: #f2f2f7; color: #000000;
  font: 17px/1.3 -apple-system, BlinkMacSystemFont, 'Helvetica Neue', sans-serif;
}
.sp-device {
  box-sizing: border-box; width: 390px; min-height: 600px; margin: 0 auto;
  padding: 12px; background: #ffffff; border-radius: 36px; overflow: hidden;
  display: flex; flex-direction: column; align-items: center;
}
.sp-device > * { max-width: 100%; }
.sp-errors {
  margin: 0 auto 12px; max-width: 390px; padding: 8px 12px; border-radius: 10px;
  background: #fff4e5; color: #8a4b00; font-size: 13px;
}
.sp-errors ul { margin: 4px 0 0; padding-left: 18px; }
.sp-list, .sp-form {
  display: flex; flex-direction: column; gap: 0; align-self: stretch;
  background: #f2f2f7; padding: 8px 0; margin: 0;
}
.sp-row {
  display: flex; align-items: center; min-height: 44px; padding: 0 16px;
  background: #ffffff; border-bottom: 0.5px solid rgba(60, 60, 67, 0.29);
}
.sp-list-plain .sp-row { background: transparent; }
.sp-section { display: flex; flex-direction: column; margin: 8px 0; }
.sp-section-header, .sp-section-footer {
  padding: 6px 16px; font-size: 13px; color: #8e8e93;
}
.sp-section-header { text-transform: uppercase; }
.sp-button {
  font: inherit; border: none; background: none; color: #007aff; padding: 0;
  cursor: pointer;
}
.sp-button-borderedProminent { background: #007aff; color: #ffffff; padding: 7px 14px; border-radius: 8px; }
.sp-button-bordered { background: rgba(0, 122, 255, 0.15); padding: 7px 14px; border-radius: 8px; }
.sp-button-destructive { color: #ff3b30; }
.sp-control { display: flex; align-items: center; justify-content: space-between; gap: 8px; align-self: stretch; }
.sp-switch {
  display: inline-block; width: 51px; height: 31px; border-radius: 16px;
  background: #e9e9eb; position: relative;
}
.sp-switch::after {
  content: ""; position: absolute; top: 2px; left: 2px; width: 27px; height: 27px;
  border-radius: 50%; background: #ffffff; box-shadow: 0 2px 4px rgba(0, 0, 0, 0.2);
}
.sp-textfield { font: inherit; border: none; background: transparent; align-self: stretch; }
.sp-textfield-roundedBorder { border: 0.5px solid #c6c6c8; border-radius: 6px; padding: 4px 8px; }
textarea { font: inherit; align-self: stretch; min-height: 80px; }
.sp-slider { align-self: stretch; accent-color: var(--sp-tint, #007aff); }
.sp-stepper-buttons span { display: inline-block; padding: 2px 12px; background: #e9e9eb; border-radius: 6px; margin-left: 1px; }
.sp-chip { background: #e9e9eb; border-radius: 6px; padding: 4px 10px; }
.sp-swatch { width: 28px; height: 28px; border-radius: 50%; background: conic-gradient(red, yellow, lime, aqua, blue, magenta, red); }
.sp-spinner {
  display: inline-block; width: 18px; height: 18px; border-radius: 50%;
  border: 2px solid #c7c7cc; border-top-color: #8e8e93;
}
progress { align-self: stretch; accent-color: var(--sp-tint, #007aff); }
.sp-symbol { color: #007aff; }
.sp-image {
  display: flex; align-items: center; justify-content: center; min-width: 40px; min-height: 40px;
  background: #e5e5ea; color: #8e8e93; font-size: 12px;
}
.sp-async-image { max-width: 100%; }
.sp-navbar { align-self: stretch; padding: 0 16px; }
.sp-nav-title { font-size: 34px; font-weight: 700; margin: 4px 0 8px; }
.sp-nav-title-inline { font-size: 17px; font-weight: 600; text-align: center; margin: 4px 0; }
.sp-toolbar { display: flex; justify-content: flex-end; gap: 12px; color: #007aff; }
.sp-search {
  box-sizing: border-box; margin: 0 16px 8px; width: calc(100% - 32px); border: none;
  border-radius: 10px; padding: 7px 10px; background: rgba(118, 118, 128, 0.12); font: inherit;
}
.sp-navigationview, .sp-navigationstack, .sp-tabview { display: flex; flex-direction: column; align-self: stretch; flex: 1 1 auto; }
.sp-nav-content { display: flex; flex-direction: column; align-items: center; gap: 8px; }
.sp-navigationlink { display: flex; align-items: center; justify-content: space-between; align-self: stretch; color: inherit; }
.sp-chevron { color: #c7c7cc; font-size: 20px; }
.sp-tab-content { flex: 1 1 auto; display: flex; flex-direction: column; align-items: center; }
.sp-tabbar { display: flex; justify-content: space-around; border-top: 0.5px solid rgba(60, 60, 67, 0.29); padding: 6px 0; }
.sp-tab { display: flex; flex-direction: column; align-items: center; font-size: 10px; color: #8e8e93; }
.sp-tab-selected { color: #007aff; }
.sp-tab-icon { font-size: 22px; }
.sp-sidebar { flex: 0 0 35%; border-right: 0.5px solid rgba(60, 60, 67, 0.29); }
.sp-detail { flex: 1 1 auto; }
.sp-segmented { display: flex; background: rgba(118, 118, 128, 0.12); border-radius: 8px; padding: 2px; align-self: stretch; }
.sp-segment { flex: 1 1 0; text-align: center; padding: 4px 8px; font-size: 13px; }
.sp-segment-selected { background: #ffffff; border-radius: 6px; }
.sp-menu-label { color: #007aff; list-style: none; cursor: pointer; }
.sp-badge {
  position: absolute; top: -6px; right: -10px; min-width: 18px; padding: 0 5px;
  border-radius: 9px; background: #ff3b30; color: #ffffff; font-size: 12px; text-align: center;
}
.sp-placeholder, .sp-unknown {
  display: flex; align-items: center; justify-content: center; padding: 8px 12px;
  border: 1px dashed #c7c7cc; border-radius: 8px; color: #8e8e93; font-size: 13px;
}
"""


def render_document(result, options=None, title="SwiftUI Preview"):
    """Build a complete HTML page for a parse result.

    The page allows no scripts and only inline styles, remote images are
    limited to https.

    Args:
        result: (ParseResult) Outcome of `parse`
        options: (RenderOptions | None) Rendering settings
        title: (str) Document title

    Returns:
        (str) HTML document
    """
    banner = render_error_banner(result.errors)
    body = render(result.root, options) if result.root is not None else ""
    device = f'<main class="sp-device">{body}</main>' if body else ""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f'<meta http-equiv="Content-Security-Policy" content="{CONTENT_SECURITY_POLICY}">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"<title>{html.escape(title)}</title>\n"
        f"<style>{BASE_STYLESHEET}</style>\n"
        "</head>\n"
        "<body>\n"
        f"{banner}{device}\n"
        "</body>\n"
        "</html>\n"
    )
