"""
Anamola membership API entry point.
"""
import os
import sys
import traceback

print("[Anamola] ========================================")
print("[Anamola] Starting Anamola membership API v1.0.0")
print("[Anamola] ========================================")

# Default to production for container deployment
config_name = os.getenv('FLASK_ENV', 'production')
print(f"[Anamola] Config: {config_name}")
print(f"[Anamola] PORT: {os.getenv('PORT', 'not set')}")
print(f"[Anamola] DATABASE_URL: {'set' if os.getenv('DATABASE_URL') else 'NOT SET'}")

try:
    from app import create_app
    app = create_app(config_name)
    print(f"[Anamola] Routes: {len(list(app.url_map.iter_rules()))}")
except Exception as e:
    print(f"[Anamola] FATAL ERROR during app creation: {e}")
    traceback.print_exc()
    sys.exit(1)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=app.config['PORT'],
        debug=config_name == 'development'
    )
