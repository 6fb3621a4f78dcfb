"""Templating utilities for run report renderers.

Every ``{{ ... }}`` interpolation goes through ``sanitize_text`` via the
environment's ``finalize`` hook; only ``Markup`` it (or a template of this
environment) produced is emitted as-is.
"""

from __future__ import annotations

import unicodedata
from typing import Any

from jinja2 import BaseLoader, Environment
from markupsafe import Markup, escape


def sanitize_text(value: Any) -> Markup:
    if value is None:
        return Markup("")
    if isinstance(value, Markup):
        return value
    text = value if isinstance(value, str) else str(value)
    return escape(unicodedata.normalize("NFC", text))


def rich_text(value: Any) -> Markup:
    """Escaped text with line breaks kept as ``<br />``."""
    if value is None or value == "":
        return Markup("—")
    return Markup("<br />").join(sanitize_text(line) for line in str(value).split("\n"))


def render_markup(template: Any, **context: Any) -> Markup:
    return Markup(template.render(**context))


HTML_ENV = Environment(
    loader=BaseLoader(),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    finalize=sanitize_text,
)
HTML_ENV.filters["rich_text"] = rich_text


PARAGRAPHS_TEMPLATE = HTML_ENV.from_string(
    """{% for paragraph in paragraphs %}
<p>{{ paragraph }}</p>
{% endfor %}
{% if bullets %}
<ul>
{% for bullet in bullets %}
  <li>{{ bullet }}</li>
{% endfor %}
</ul>
{% endif %}
"""
)

SUMMARY_LIST_TEMPLATE = HTML_ENV.from_string(
    """<ul class="summary-list">
{% for item in items %}
  <li>
    <span class="icon" aria-hidden="true">{{ item.icon }}</span>
    <div>
      <strong>{{ item.label }}:</strong>
      <p>{{ item.value }}</p>
    </div>
  </li>
{% endfor %}
</ul>
"""
)

DEFINITION_GRID_TEMPLATE = HTML_ENV.from_string(
    """<dl class="audit-grid">
{% for label, value in entries %}
  <div><dt>{{ label }}</dt><dd>{{ value }}</dd></div>
{% endfor %}
</dl>
"""
)

SIGNATURE_TEMPLATE = HTML_ENV.from_string(
    """<div class="signature-grid">
{% for title, value in entries %}
  <article class="signature-card {{ variant }}">
    <h3>{{ title }}</h3>
    <p>{{ value }}</p>
  </article>
{% endfor %}
</div>
"""
)

RECOMMENDATIONS_TABLE_TEMPLATE = HTML_ENV.from_string(
    """<table>
  <thead>
    <tr>
      <th>#</th>
      <th>Tactic &amp; rationale</th>
      <th>Next steps</th>
      <th>Execution</th>
      <th>Score</th>
      <th>Status</th>
    </tr>
  </thead>
  <tbody>
{% for rec in recommendations %}
    <tr class="{{ 'critical' if rec.critical else 'regular' }}">
      <td>{{ rec.priority }}</td>
      <td><strong>{{ rec.title }}</strong><br/>{{ rec.rationale|rich_text }}</td>
      <td>{{ rec.next_steps or '—' }}</td>
      <td>{{ rec.execution_summary }}</td>
      <td>{{ rec.score_label }}{% if rec.delta_label %} <span class="delta delta-{{ rec.delta_tone }}">{{ rec.delta_label }}</span>{% endif %}</td>
      <td>{{ rec.status_label }}</td>
    </tr>
{% endfor %}
  </tbody>
</table>
"""
)

MUTED_NOTICE_TEMPLATE = HTML_ENV.from_string("""<p class="muted">{{ message }}</p>\n""")

TIMELINE_TEMPLATE = HTML_ENV.from_string(
    """<div class="timeline">
{% for card in cards %}
  <article class="timeline-row">
    <p class="timeline-period">{{ card.period }}</p>
    <h3>{{ card.activity }}</h3>
    <div class="timeline-progress"><span style="width:{{ card.progress }}%"></span></div>
    <p>{{ card.description }}</p>
  </article>
{% endfor %}
</div>
"""
)

INSIGHTS_TEMPLATE = HTML_ENV.from_string(
    """<div class="insight-grid">
{% for insight in insights %}
  <article class="insight-card{% if loop.index0 == 1 %} danger{% endif %}">{{ insight }}</article>
{% endfor %}
</div>
"""
)

CTA_TEMPLATE = HTML_ENV.from_string(
    """<div class="insight-card cta-card">
{{ content }}
</div>
"""
)

LINKS_TEMPLATE = HTML_ENV.from_string(
    """<ul class="link-list">
{% for link in links %}
  <li>
    <span class="link-label">{{ link.label }}</span>
    <a href="{{ link.url }}" target="_blank" rel="noopener noreferrer">{{ link.url }}</a>
    <small>{{ link.description }}</small>
  </li>
{% endfor %}
</ul>
"""
)

REPORT_STYLES = Markup("""
      @page { size: A4; margin: 18mm; }
      * { box-sizing: border-box; }
      body { margin: 0; padding: 0; background: #f8fafc; color: #0f172a; font-family: 'Noto Sans', sans-serif; font-size: 12px; line-height: 1.6; }
      #toolbar { position: sticky; top: 0; z-index: 9999; display: flex; gap: 8px; padding: 8px 16px; background: #0f172a; color: #e2e8f0; }
      #toolbar button { padding: 6px 14px; border-radius: 999px; border: none; font-size: 12px; font-weight: 600; cursor: pointer; }
      #toolbar button#toggle-edit { background: #6366f1; color: #fff; }
      #toolbar button#save-html { background: transparent; border: 1px solid rgba(255,255,255,0.45); color: #e2e8f0; }
      #toolbar button#print-pdf { background: #0ea5e9; color: #0f172a; }
      main { background: #ffffff; border-radius: 24px; padding: 36px 40px 48px; box-shadow: 0 24px 48px rgba(15,23,42,0.08); }
      h1, h2, h3 { font-family: 'Noto Serif', serif; margin: 0 0 12px; color: #0f172a; }
      h2 { font-size: 18px; }
      h3 { font-size: 15px; }
      p { margin: 0 0 8px; }
      .muted { color: #475569; font-size: 11px; }
      .hero { background: var(--hero-gradient); border-radius: 30px; padding: 28px 32px; color: var(--hero-text); margin-bottom: 28px; }
      .hero-content { display: flex; justify-content: space-between; gap: 18px; flex-wrap: wrap; }
      .hero h1 { color: var(--hero-text); margin: 0 0 6px; font-size: 30px; }
      .hero .muted, .hero small { color: var(--hero-text); opacity: 0.85; }
      .hero-badges, .chip-group { display: flex; flex-wrap: wrap; gap: 10px; align-items: center; }
      .chip { padding: 4px 10px; border-radius: 999px; background: var(--accent-soft); font-size: 11px; }
      .badge { padding: 8px 14px; border-radius: 999px; font-size: 11px; font-weight: 700; letter-spacing: 0.08em; text-transform: uppercase; background: var(--badge-bg); color: var(--badge-color); }
      .badge.status-success { background: rgba(52,211,153,0.25); color: #bbf7d0; }
      .badge.status-error { background: rgba(248,113,113,0.25); color: #fecaca; }
      .badge.status-running, .badge.status-pending, .badge.status-blocked { background: rgba(253,224,71,0.35); color: #fef9c3; }
      .metric-grid { display: flex; gap: 18px; margin-bottom: 32px; padding: 10px; border-radius: 28px; overflow-x: auto; }
      .metric-card { flex: 1; min-width: 190px; border-radius: 26px; padding: 20px 26px; background: var(--panel-bg); color: var(--hero-text); box-shadow: 0 24px 35px var(--panel-glow); display: flex; align-items: center; gap: 16px; }
      .metric-icon { width: 44px; height: 44px; border-radius: 14px; display: flex; align-items: center; justify-content: center; font-size: 22px; }
      .metric-label { text-transform: uppercase; font-size: 11px; letter-spacing: 0.15em; opacity: 0.65; margin-bottom: 4px; }
      .metric-card strong { font-size: 18px; }
      .section { margin-bottom: 28px; }
      .summary-list { list-style: none; padding: 0; margin: 12px 0 0; display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 10px 16px; }
      .summary-list li { display: flex; gap: 8px; padding: 12px; border-radius: 14px; background: var(--accent-soft); }
      .signature-grid, .insight-grid, .timeline { display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 12px; }
      .signature-card { border-radius: 18px; padding: 16px 18px; border: 1px solid rgba(226,232,240,0.8); background: #ffffff; }
      .signature-card.pitch { border-color: rgba(192,132,252,0.4); background: rgba(249,245,255,0.9); }
      .signature-card.j360 { border-color: rgba(45,212,191,0.4); background: rgba(240,253,250,0.92); }
      .signature-card.guardian { border-color: rgba(251,191,36,0.5); background: rgba(255,248,235,0.92); }
      table { width: 100%; border-collapse: collapse; font-size: 11px; }
      thead { background: #e2e8f0; text-transform: uppercase; letter-spacing: 0.08em; }
      th, td { padding: 10px 12px; border-bottom: 1px solid #e2e8f0; text-align: left; vertical-align: top; }
      tr.critical td:first-child { border-left: 3px solid var(--accent-color); }
      .delta { font-weight: 700; margin-left: 4px; }
      .delta-positive { color: #059669; }
      .delta-negative { color: #dc2626; }
      .delta-neutral { color: #64748b; }
      .timeline-row { border-radius: 16px; padding: 16px; border: 1px solid #e2e8f0; background: #fff; }
      .timeline-period { font-size: 11px; text-transform: uppercase; letter-spacing: 0.08em; color: #64748b; margin-bottom: 4px; }
      .timeline-progress { height: 6px; border-radius: 999px; background: #e2e8f0; margin: 8px 0; }
      .timeline-progress span { display: block; height: 100%; border-radius: 999px; background: var(--accent-color); }
      .insight-card { border-radius: 16px; padding: 14px; font-weight: 600; background: #fef3c7; border: 1px solid #fcd34d; color: #92400e; }
      .insight-card.danger { background: #fee2e2; border-color: #fca5a5; color: #991b1b; }
      .insight-card.cta-card { background: #e0f2fe; border-color: #bae6fd; color: #0f172a; }
      .link-list { list-style: none; padding: 0; margin: 0; display: grid; gap: 12px; }
      .link-list li { padding: 12px 14px; border-radius: 14px; border: 1px solid #e2e8f0; background: #fff; }
      .link-list a { color: #2563eb; text-decoration: none; font-weight: 600; display: inline-block; margin: 2px 0; }
      .link-label { font-size: 11px; text-transform: uppercase; letter-spacing: 0.08em; color: #475569; display: block; }
      .audit-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 12px; }
      .audit-grid dt { font-size: 10px; text-transform: uppercase; letter-spacing: 0.08em; color: #475569; margin-bottom: 4px; }
      .audit-grid dd { margin: 0; font-weight: 600; }
      .report-footer { margin-top: 28px; padding-top: 14px; border-top: 1px solid #e2e8f0; display: flex; justify-content: space-between; font-size: 11px; color: #475569; }
      @media print {
        body { background: #fff; }
        #toolbar { display: none !important; }
        main { box-shadow: none; margin: 0; padding: 20px; }
      }
""")

DOCUMENT_TEMPLATE = HTML_ENV.from_string(
    """<!DOCTYPE html>
<html lang="{{ doc.lang }}">
  <head>
    <meta charset="utf-8" />
    <title>Run {{ doc.run_id }}</title>
    <style>
      :root {
        color-scheme: light;
        --hero-gradient: {{ doc.theme.hero_gradient }};
        --panel-bg: {{ doc.theme.panel_bg }};
        --panel-glow: {{ doc.theme.panel_glow }};
        --hero-text: {{ doc.theme.text_on_hero }};
        --accent-color: {{ doc.theme.accent }};
        --accent-soft: {{ doc.theme.accent_soft }};
        --badge-bg: {{ doc.theme.badge_bg }};
        --badge-color: {{ doc.theme.badge_color }};
      }
{{ styles }}
    </style>
  </head>
  <body class="theme-{{ doc.theme.id }}">
    <div id="toolbar">
      <button id="print-pdf">Export PDF</button>
{% if doc.editable %}
      <button id="toggle-edit">Edit</button>
      <button id="save-html">Save HTML</button>
{% endif %}
    </div>
    <div class="hero"{% if doc.editable %} data-editable contenteditable="false"{% endif %}>
      <div class="hero-content">
        <div>
          <p class="muted">Operation #{{ doc.short_id }}</p>
          <h1>{{ doc.title }}</h1>
          <small>{{ doc.diagnostic_caption }}</small>
          <div class="chip-group">
{% for chip in doc.chips %}
            <span class="chip">{{ chip }}</span>
{% endfor %}
          </div>
        </div>
        <div class="hero-badges">
{% for badge in doc.badges %}
          <span class="badge{% if badge.css_class %} {{ badge.css_class }}{% endif %}">{{ badge.label }}</span>
{% endfor %}
        </div>
      </div>
    </div>
    <main{% if doc.editable %} data-editable-root{% endif %}>
      <section class="metric-grid"{% if doc.editable %} data-editable contenteditable="false"{% endif %}>
{% for metric in doc.metrics %}
        <article class="metric-card">
          <div class="metric-icon" aria-hidden="true">{{ metric.icon }}</div>
          <div class="metric-details">
            <p class="metric-label">{{ metric.label }}</p>
            <strong>{{ metric.value }}</strong>
          </div>
        </article>
{% else %}
        <p class="muted">No metrics recorded for this run.</p>
{% endfor %}
      </section>
{% for section in doc.sections %}
      <section class="section section-{{ section.key }}{% if section.css_class %} {{ section.css_class }}{% endif %}"{% if doc.editable %} data-editable contenteditable="false"{% endif %}>
{% if section.heading %}
        <header>
          <h2>{{ section.heading }}</h2>
{% if section.subtitle %}
          <p class="muted">{{ section.subtitle }}</p>
{% endif %}
        </header>
{% endif %}
{{ section.body }}
      </section>
{% endfor %}
      <footer class="report-footer"{% if doc.editable %} data-editable contenteditable="false"{% endif %}>
        <span>{{ doc.footer_label }}</span>
        <span>{{ doc.footer_stamp }}</span>
      </footer>
    </main>
    <script>
(function(){
  var printBtn = document.getElementById('print-pdf');
  if (printBtn) {
    printBtn.addEventListener('click', function () { window.print(); });
  }
{% if doc.editable %}
  var root = document.querySelector('[data-editable-root]');
  var toggleBtn = document.getElementById('toggle-edit');
  var saveBtn = document.getElementById('save-html');
  if (root && toggleBtn && saveBtn) {
    var editing = false;
    toggleBtn.addEventListener('click', function () {
      editing = !editing;
      document.querySelectorAll('[data-editable]').forEach(function (el) {
        el.setAttribute('contenteditable', editing ? 'true' : 'false');
      });
      toggleBtn.textContent = editing ? 'Done editing' : 'Edit';
    });
    saveBtn.addEventListener('click', function () {
      var blob = new Blob([document.documentElement.outerHTML], { type: 'text/html;charset=utf-8' });
      var link = document.createElement('a');
      link.href = URL.createObjectURL(blob);
      link.download = (document.title || 'run-report') + '.html';
      document.body.appendChild(link);
      link.click();
      document.body.removeChild(link);
      setTimeout(function () { URL.revokeObjectURL(link.href); }, 0);
    });
  }
{% endif %}
{% if doc.auto_print %}
  window.addEventListener('load', function () {
    setTimeout(function () { window.print(); }, 350);
  }, { once: true });
{% endif %}
})();
    </script>
  </body>
</html>
"""
)


__all__ = [
    "HTML_ENV",
    "sanitize_text",
    "rich_text",
    "render_markup",
    "PARAGRAPHS_TEMPLATE",
    "SUMMARY_LIST_TEMPLATE",
    "DEFINITION_GRID_TEMPLATE",
    "SIGNATURE_TEMPLATE",
    "RECOMMENDATIONS_TABLE_TEMPLATE",
    "MUTED_NOTICE_TEMPLATE",
    "TIMELINE_TEMPLATE",
    "INSIGHTS_TEMPLATE",
    "CTA_TEMPLATE",
    "LINKS_TEMPLATE",
    "REPORT_STYLES",
    "DOCUMENT_TEMPLATE",
]
