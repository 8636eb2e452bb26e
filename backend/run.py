#!/usr/bin/env python3
"""
NatureUP Backend - Run Script
Starts the FastAPI backend server after a few environment checks.
"""

import sys
import subprocess
import socket
from pathlib import Path

from natureup.core.config import settings

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_port_open(host, port):
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(2)
    result = sock.connect_ex((host, port))
    sock.close()
    return result == 0

def main():
    print_colored("🌲 Starting NatureUP Backend...", "blue")

    if not Path("natureup/main.py").exists():
        print_colored("❌ Error: natureup/main.py not found. Please run this script from the backend directory.", "red")
        sys.exit(1)

    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  Warning: no .env file found.", "yellow")
        print("Endpoints that call OpenAI or AllTrails need:")
        print("  OPENAI_API_KEY=your_api_key_here")
        print("  ALLTRAILS_API_TOKEN=your_token_here")

    if settings.STORAGE_MODE == "mongodb":
        print_colored("🔍 Checking MongoDB connection...", "blue")
        if not check_port_open("localhost", 27017):
            print_colored("⚠️  Warning: MongoDB doesn't appear to be running on localhost:27017", "yellow")
            print("Start it with: docker run -d -p 27017:27017 mongo:7.0")
            print("or set STORAGE_MODE=local to cache on disk.")
            response = input("Continue anyway? (y/N): ").strip().lower()
            if response != 'y':
                sys.exit(1)

    print_colored("✅ All checks passed!", "green")
    print("📍 Backend will be available at: http://localhost:8000")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "natureup.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
