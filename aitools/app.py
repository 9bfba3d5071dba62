"""Main Flask application."""

import logging
import os

from flask import Flask, jsonify

from aitools.ai import (
    AIToolsError,
    DeepLClient,
    get_ai_config,
    init_tools_service,
    read_settings,
    verify_api_connection,
)
from aitools.blueprints.aitools import aitools_bp
from aitools.config import Config
from aitools.services.startup_checks import (
    run_startup_config_audit,
    should_fail_fast_on_config_audit,
)

logger = logging.getLogger(__name__)


def create_app(config_class: type = Config) -> Flask:
    """Create and configure the Flask application."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    app = Flask(__name__)
    app.config.from_object(config_class)

    config_audit = run_startup_config_audit(app)
    app.extensions["startup_config_audit"] = config_audit

    for warning in config_audit.get("warnings", []):
        logger.warning("Startup config warning: %s", warning)
    for error in config_audit.get("errors", []):
        logger.error("Startup config issue: %s", error)
    if config_audit.get("errors") and should_fail_fast_on_config_audit(app):
        raise RuntimeError(
            "Startup config audit failed with errors: "
            + "; ".join(config_audit["errors"])
        )

    # Initialize AI Tools service
    init_tools_service(app)

    # Register blueprints
    app.register_blueprint(aitools_bp)

    @app.route("/health")
    def health_check():
        """Health check endpoint."""
        audit = app.extensions.get("startup_config_audit", {"warnings": [], "errors": []})
        return jsonify(
            {
                "status": "healthy" if not audit.get("errors") else "degraded",
                "version": "1.0.0",
                "config_warnings": list(audit.get("warnings", [])),
                "config_errors": list(audit.get("errors", [])),
            }
        )

    # CLI commands for administrators
    @app.cli.command("aitools-test-connection")
    def test_connection_command():
        """Check the AI endpoint is reachable and offers the configured model."""
        config = get_ai_config(read_settings(app.config))
        try:
            verify_api_connection(config)
        except AIToolsError as e:
            print(f"Connection test failed: {e}")
            raise SystemExit(1) from e
        print(f"Connection OK: {config.api_url} offers model {config.model}")

    @app.cli.command("aitools-deepl-languages")
    def deepl_languages_command():
        """List the DeepL target languages (checks the DeepL configuration)."""
        settings = read_settings(app.config)
        try:
            client = DeepLClient(
                str(settings.get("deepl_api_key") or ""), settings.get("deepl_api_url")
            )
            languages = client.target_languages()
        except AIToolsError as e:
            print(f"DeepL check failed: {e}")
            raise SystemExit(1) from e
        for language in languages:
            print(f"{language.get('language')}\t{language.get('name')}")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=os.environ.get("FLASK_DEBUG", "false").lower() == "true")
