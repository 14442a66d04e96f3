from flask import url_for
from tabulate import tabulate

from app import create_app

app = create_app()

def print_routes():
    table = []
    with app.test_request_context():
        for rule in app.url_map.iter_rules():
            methods = ",".join(sorted(rule.methods))
            url = url_for(rule.endpoint, **{arg: f"<{arg}>" for arg in rule.arguments})
            table.append([rule.endpoint, url, methods])
    app.logger.info("\n" + tabulate(table, headers=["Endpoint", "URL", "Methods"]))

if __name__ == '__main__':
    print_routes()
    app.run(debug=True, port=5000)
