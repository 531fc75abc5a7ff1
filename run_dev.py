#!/usr/bin/env python3
"""Development server runner for the escout account API."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def setup_environment():
    """Set up the development environment."""
    project_root = Path(__file__).parent

    env_file = project_root / '.env'
    if env_file.exists():
        load_dotenv(env_file)
        print(f"✓ Loaded environment from {env_file}")
    else:
        print(f"⚠️ No .env file found at {env_file}")

    # Set default Flask environment variables
    os.environ.setdefault('FLASK_APP', 'escout')
    os.environ.setdefault('FLASK_DEBUG', '1')


def initialize_database(app):
    """Create tables if they don't exist yet."""
    from escout.extensions import db

    with app.app_context():
        db.create_all()
    print("✓ Database tables ready")


def run_development_server():
    """Run the Flask development server."""
    from escout import create_app

    app = create_app()
    initialize_database(app)
    port = app.config.get('PORT', 5000)

    print("\n" + "="*60)
    print("🚀 Starting escout Development Server")
    print("="*60)
    print(f"Debug mode: {os.environ.get('FLASK_DEBUG', '0') == '1'}")
    print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']}")
    print(f"Email delivery: {'SMTP' if app.config.get('EMAIL_ENABLED') else 'logged only'}")
    print("\n📱 API available at:")
    print(f"   • http://localhost:{port}/api/auth")
    print("\n🛠️ To create a ready-to-use account, run in another terminal:")
    print("   flask account create --email player@demo.com --password secret1 --role player")
    print("\n⏹️ Press Ctrl+C to stop the server")
    print("="*60)

    app.run(
        host='0.0.0.0',
        port=port,
        debug=True,
        use_reloader=True
    )


def main():
    """Main function to set up and run the development server."""
    print("escout account API - Development Setup")
    print("="*60)

    setup_environment()

    try:
        run_development_server()
    except KeyboardInterrupt:
        print("\n\n🛑 Development server stopped by user")
    except Exception as e:
        print(f"\n❌ Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
