import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated; '*' allows any origin (LAN party setup)
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Seconds a disconnected team keeps its name before being purged
    DISCONNECT_GRACE_SEC = float(os.environ.get('DISCONNECT_GRACE_SEC', '60'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
