"""
JsHunter Web Interface
Flask-based UI and JSON command surface for browsing, clearing and exporting passive scan findings.
"""

from flask import Flask, Response, render_template_string, request, jsonify

from jshunter.hunter import JsHunter
from jshunter.models import Category


MAIN_TEMPLATE = r'''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>JS Hunter - Findings</title>
    <style>
        :root {
            --bg-primary: #050810;
            --bg-card: #0d1320;
            --text-primary: #f0f4f8;
            --text-secondary: #8b9cb3;
            --border-color: #1e293b;
            --accent-cyan: #06d6e0;
        }
        body { background: var(--bg-primary); color: var(--text-primary); font-family: monospace; margin: 2rem; }
        h1 { color: var(--accent-cyan); }
        .stats span { margin-right: 1.5rem; color: var(--text-secondary); }
        table { width: 100%; border-collapse: collapse; background: var(--bg-card); margin-top: 1rem; }
        th, td { border-bottom: 1px solid var(--border-color); padding: 6px 8px; text-align: left; vertical-align: top; }
        td.value { word-break: break-all; }
        .sev-critical { color: #f43f5e; font-weight: bold; }
        .sev-high { color: #f97316; }
        .sev-medium { color: #fbbf24; }
        .sev-low { color: #3b82f6; }
        .sev-info { color: #8b9cb3; }
        a { color: var(--accent-cyan); }
    </style>
</head>
<body>
    <h1>JS Endpoint &amp; Secret Hunter</h1>
    <div class="stats">
        <span>Total: {{ stats.total }}</span>
        <span>Scripts scanned: {{ stats.scanned_files }}</span>
        {% for sev, count in stats.by_severity.items() %}<span class="sev-{{ sev }}">{{ sev|upper }}: {{ count }}</span>{% endfor %}
        <span>Scanner: {{ 'enabled' if enabled else 'disabled' }}</span>
    </div>
    <div>
        Filter:
        <a href="/">all</a>
        {% for cat in categories %}<a href="/?type={{ cat }}">{{ cat }}</a> {% endfor %}
        | Export: <a href="/api/export/json">JSON</a> <a href="/api/export/csv">CSV</a>
    </div>
    <table>
        <thead>
            <tr><th>Severity</th><th>Type</th><th>Pattern</th><th>Value</th><th>File</th><th>Source</th><th>Found</th></tr>
        </thead>
        <tbody>
        {% for r in results %}
            <tr>
                <td class="sev-{{ r.severity }}">{{ r.severity }}</td>
                <td>{{ r.category }}</td>
                <td>{{ r.pattern_name }}</td>
                <td class="value">{{ r.value }}</td>
                <td class="value">{{ r.file_url }}</td>
                <td class="value">{{ r.origin_url }}</td>
                <td>{{ r.discovered_at }}</td>
            </tr>
        {% else %}
            <tr><td colspan="7">No findings yet.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</body>
</html>
'''

EXPORT_MIMETYPES = {
    'json': 'application/json',
    'csv': 'text/csv',
}


def _parse_category(value):
    if not value:
        return None
    return Category(value.lower())


def create_app(hunter: JsHunter) -> Flask:
    app = Flask(__name__)
    app.config['HUNTER'] = hunter

    @app.route('/')
    def index():
        try:
            category = _parse_category(request.args.get('type'))
        except ValueError:
            category = None

        findings = hunter.get_results_by_type(category) if category else hunter.store.all()
        return render_template_string(
            MAIN_TEMPLATE,
            results=[f.to_dict() for f in findings],
            stats=hunter.get_stats(),
            categories=[c.value for c in Category],
            enabled=hunter.enabled
        )

    @app.route('/api/results', methods=['GET'])
    def api_results():
        try:
            category = _parse_category(request.args.get('type'))
        except ValueError:
            return jsonify({'success': False, 'error': 'Unknown result type'}), 400

        if category is None:
            payload = hunter.get_results()
        else:
            payload = {
                'results': [f.to_dict() for f in hunter.get_results_by_type(category)],
                'stats': hunter.get_stats()
            }
        payload['success'] = True
        return jsonify(payload)

    @app.route('/api/stats', methods=['GET'])
    def api_stats():
        return jsonify({'success': True, 'stats': hunter.get_stats()})

    @app.route('/api/clear', methods=['POST'])
    def api_clear():
        return jsonify(hunter.clear_results())

    @app.route('/api/toggle', methods=['POST'])
    def api_toggle():
        return jsonify(hunter.toggle_enabled())

    @app.route('/api/export/<fmt>', methods=['GET'])
    def api_export(fmt):
        try:
            data = hunter.export_results(fmt)
        except ValueError as e:
            return jsonify({'success': False, 'error': str(e)}), 400

        fmt = fmt.lower()
        return Response(
            data,
            mimetype=EXPORT_MIMETYPES[fmt],
            headers={'Content-Disposition': f'attachment; filename=js_findings.{fmt}'}
        )

    return app


if __name__ == '__main__':
    create_app(JsHunter()).run(host='127.0.0.1', port=6789, debug=True)
