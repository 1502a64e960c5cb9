from __future__ import annotations

"""
Design system for the admin UI (light slate).

Rules:
- Pages use the STYLE_* constants or the wrappers in `ui_components.py`, not long inline class strings.
- The outer card defines padding; inner layouts use gap only.
"""

C_FONT_STACK = '"Inter", system-ui, -apple-system, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif'
C_NUMERIC = "tabular-nums"

# CSS braces are doubled for the f-string.
APP_FONT_CSS = f"""
<link rel="preconnect" href="https://fonts.googleapis.com">
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap" rel="stylesheet">
<style>
  :root, body, .q-body {{
    font-family: {C_FONT_STACK};
    color-scheme: light;
    --bd-bg: #f8fafc;
    --bd-surface: #ffffff;
    --bd-border: #e2e8f0;
    --bd-text: #0f172a;
    --bd-muted: #64748b;
    --bd-accent: #0284c7;
  }}
  body, .q-body, .nicegui-content {{
    background: var(--bd-bg) !important;
    color: var(--bd-text) !important;
  }}
  .q-card, .q-menu, .q-dialog, .q-notification, .q-btn {{
    box-shadow: none !important;
  }}
  .q-field--outlined .q-field__control {{
    background: var(--bd-surface) !important;
    border-radius: 0.75rem;
  }}
  .q-field--outlined .q-field__control:before {{
    border-color: var(--bd-border) !important;
  }}
  .q-notification {{
    border: 1px solid var(--bd-border) !important;
    border-left: 3px solid var(--bd-accent) !important;
    border-radius: 12px;
  }}
  .q-table__container {{
    border: 1px solid var(--bd-border);
    border-radius: 0.75rem;
  }}
</style>
"""

STYLE_BG = "bg-slate-50 text-slate-900 min-h-screen"
STYLE_CONTAINER = "w-full max-w-6xl mx-auto px-6 py-6 gap-6"

STYLE_CARD = "bg-white border border-slate-200 shadow-sm rounded-xl"
STYLE_CARD_HOVER = "transition-colors hover:bg-slate-50 hover:border-slate-300"

STYLE_PAGE_TITLE = "text-2xl font-bold tracking-tight text-slate-900"
STYLE_SECTION_TITLE = "text-sm font-semibold text-slate-900"
STYLE_TEXT_MUTED = "text-sm text-slate-600"
STYLE_TEXT_HINT = "text-sm text-slate-400"

_BTN_BASE = "active:scale-[0.99] rounded-lg px-4 py-2 text-sm font-semibold transition-all"
STYLE_BTN_PRIMARY = f"bg-slate-900 text-white hover:bg-slate-800 {_BTN_BASE}"
STYLE_BTN_SECONDARY = f"bg-white text-slate-900 border border-slate-200 hover:bg-slate-50 {_BTN_BASE}"
STYLE_BTN_GHOST = "text-slate-600 hover:text-slate-900 hover:bg-slate-100 rounded-md px-3 py-2 text-sm font-semibold"
STYLE_BTN_DANGER = f"bg-rose-600 text-white hover:bg-rose-700 {_BTN_BASE}"

STYLE_INPUT = "w-full text-sm"
STYLE_TABLE = "w-full"

STYLE_NAV_ITEM = "text-slate-600 hover:bg-slate-100 hover:text-slate-900 rounded-lg"
STYLE_NAV_ITEM_ACTIVE = "bg-slate-900 text-white rounded-lg"
STYLE_NAV_SECTION = "text-xs font-semibold text-slate-400 uppercase tracking-wider px-2 mt-1"

STYLE_DRAWER = "w-full max-w-3xl"

_BADGE = "px-2 py-0.5 rounded-full text-xs font-medium text-center"
STYLE_BADGE_GREEN = f"bg-emerald-50 text-emerald-700 border border-emerald-200 {_BADGE}"
STYLE_BADGE_BLUE = f"bg-sky-50 text-sky-700 border border-sky-200 {_BADGE}"
STYLE_BADGE_GRAY = f"bg-slate-100 text-slate-700 border border-slate-200 {_BADGE}"
STYLE_BADGE_YELLOW = f"bg-amber-50 text-amber-700 border border-amber-200 {_BADGE}"
STYLE_BADGE_RED = f"bg-rose-50 text-rose-700 border border-rose-200 {_BADGE}"
