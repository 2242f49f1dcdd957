import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_login import LoginManager
from flask_migrate import Migrate

from models import db, Profile
from routes import register_blueprints

load_dotenv()


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=logging.DEBUG if app.debug else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    Migrate(app, db)

    # Sessions are issued by the identity provider; we only resolve the owner
    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Profile, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Unauthorized'}), 401

    register_blueprints(app)

    return app


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run(host='0.0.0.0', port=5005, debug=True)
