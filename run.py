#!/usr/bin/env python
"""
Entry point for running the Lector server.
"""

import os
import sys

# Check for required dependencies
try:
    from dotenv import load_dotenv
    import uvicorn
except ImportError as e:
    print(f"""
❌ Error: Missing required dependencies

{e}

Please install the project into your virtual environment:

    pip install -e .

Then try running again:
    python run.py
""")
    sys.exit(1)

# Load environment variables
load_dotenv()

# Configure logging before importing application modules
from lector.logging_config import configure_logging
configure_logging()

from lector.main import app, get_config


def main():
    """Run the Lector server."""
    config = get_config()

    print("""
╔══════════════════════════════════════════════════════════════╗
║                        Lector v0.1                           ║
║              AI-Assisted Code Review for Git Changes         ║
╚══════════════════════════════════════════════════════════════╝

📋 Configuration:
   - LLM Provider: {}
   - Model: {}
   - Max steps: {}
   - Report: {}
    """.format(
        config.llm_provider,
        config.llm_model_id or "default",
        config.max_steps,
        os.path.join(config.output_dir, config.report_filename)
    ))

    print(f"🚀 Server starting on http://{config.host}:{config.port}")
    print(f"📖 API docs available at http://{config.host}:{config.port}/docs")
    print(f"💚 Health check: http://{config.host}:{config.port}/health\n")

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=os.getenv("LOG_LEVEL", "info").lower()
    )


if __name__ == "__main__":
    main()
