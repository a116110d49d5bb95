"""
TextCompare - Main Flask Application
Serves the text comparison engine as a small JSON API
"""
from flask import Flask, jsonify

from config_logging import APP_NAME, VERSION, get_config, get_logger
from text_compare import tc_blueprint

logger = get_logger('app')


def create_app(testing: bool = False) -> Flask:
    """Build the Flask application with the comparison blueprint registered."""
    config = get_config()
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.warning(f"Configuration problem: {error}")

    app = Flask(__name__)
    app.config['TESTING'] = testing
    app.config['JSON_SORT_KEYS'] = False
    app.register_blueprint(tc_blueprint, url_prefix='/api/compare')

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'success': True,
            'app': APP_NAME,
            'version': VERSION,
            'status': 'healthy'
        })

    return app


def main():
    config = get_config()
    app = create_app()
    logger.info(f"Starting {APP_NAME} v{VERSION} on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=config.debug)


if __name__ == '__main__':
    main()
