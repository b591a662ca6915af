from .health import health_bp
from .vocabulary import vocabulary_bp
from .admin import admin_bp

__all__ = ['health_bp', 'vocabulary_bp', 'admin_bp']
