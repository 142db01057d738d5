#!/usr/bin/env python3
"""
PR Structure Reviewer Server

Runs the webhook receiver and manual analysis API.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from pr_structure_reviewer.config import get_config_manager
from pr_structure_reviewer.server import create_app, ENDPOINTS


config = get_config_manager().config
app = create_app(config=config)

if __name__ == '__main__':
    print("🚀 Starting PR Structure Reviewer Server...")
    print(f"📍 Server will be available at: http://localhost:{config.server.port}")
    print("📋 Endpoints:")
    for name, route in ENDPOINTS.items():
        print(f"   - {name}: {route}")
    print(f"🔐 Signature verification: {'enabled' if config.signature_verification_enabled else 'DISABLED'}")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.server.debug,
    )
