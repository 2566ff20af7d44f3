from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO

db = SQLAlchemy()

# Dashboards listen for "data_changed" and re-fetch the snapshot
socketio = SocketIO(cors_allowed_origins="*")
