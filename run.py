"""
Development server entry point
Run the Flask application with: python run.py
"""
from verivault import create_app
from verivault.config import get_env_name

# Create Flask app instance
app = create_app()

if __name__ == '__main__':
    host = app.config['HOST']
    port = app.config['PORT']
    debug = get_env_name() == 'development'

    print(f"""
    ========================================
    Starting VeriVault API Server
    ========================================
    Host: {host}
    Port: {port}
    Debug: {debug}
    Environment: {get_env_name()}
    Uploads: {app.config['UPLOAD_FOLDER']}
    Reports: {app.config['REPORTS_PATH']}
    ========================================
    """)

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True  # Allow multiple requests
    )
