"""
Voice Agent Demo Builder - Routes
API endpoint registration
"""
from flask import Flask


def register_routes(app: Flask):
    """Register all API blueprints"""

    from demo_builder.routes.clients import clients_bp
    from demo_builder.routes.demo_links import demo_links_bp

    # Register with /api prefix
    app.register_blueprint(clients_bp, url_prefix='/api/clients')
    app.register_blueprint(demo_links_bp, url_prefix='/api/demo-links')
