"""
CORS Configuration
Local front-end origins plus CLIENT_URL when it is set
"""

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
]

CORS_CONFIG = {
    "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    "allow_headers": [
        "Content-Type",
        "Authorization",
    ],
    "expose_headers": [
        "Content-Disposition",
        "X-Submission-Id",
        "X-Watermark-Hash",
    ],
    "supports_credentials": True,
    "max_age": 86400,  # 24 hours
}


def get_allowed_origins(client_url=None):
    origins = list(DEFAULT_ORIGINS)
    if client_url and client_url not in origins:
        origins.append(client_url)
    return origins


def init_cors(app):
    """
    Initialize CORS for the Flask application
    """
    from flask_cors import CORS

    origins = get_allowed_origins(app.config.get('CLIENT_URL'))
    CORS(app,
         resources={r"/api/*": {"origins": origins}},
         methods=CORS_CONFIG["methods"],
         allow_headers=CORS_CONFIG["allow_headers"],
         expose_headers=CORS_CONFIG["expose_headers"],
         supports_credentials=CORS_CONFIG["supports_credentials"],
         max_age=CORS_CONFIG["max_age"])

    app.logger.info(f"CORS enabled for origins: {', '.join(origins)}")
    return origins
