#!/usr/bin/env python3
"""
Setup Verification Script

Validates configuration and credentials before running the bot.
Run this after setting up your .env file and the Google service account key.

Usage:
    python scripts/verify_setup.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables
from dotenv import load_dotenv
load_dotenv()


def print_header(title: str) -> None:
    """Print section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print(f"{'='*60}")


def print_result(name: str, success: bool, message: str = "") -> None:
    """Print check result."""
    status = "[PASS]" if success else "[FAIL]"
    color = "\033[92m" if success else "\033[91m"
    reset = "\033[0m"
    msg = f" - {message}" if message else ""
    print(f"  {color}{status}{reset} {name}{msg}")


def check_env_file() -> bool:
    """Check if .env file exists."""
    env_path = project_root / ".env"
    exists = env_path.exists()
    if not exists:
        print_result(".env file", False, "File not found. Copy .env.example to .env")
    else:
        print_result(".env file", True, "Found")
    return exists


def check_required_vars() -> dict[str, bool]:
    """Check required environment variables."""
    results = {}

    required = [
        ("WHATSAPP_ACCESS_TOKEN", "Required to send replies"),
        ("WHATSAPP_PHONE_NUMBER_ID", "Required to send replies"),
        ("WHATSAPP_VERIFY_TOKEN", "Required for webhook verification"),
    ]

    for var, description in required:
        value = os.getenv(var, "")

        if not value:
            print_result(var, False, f"Not set - {description}")
            results[var] = False
        elif var == "WHATSAPP_VERIFY_TOKEN" and value == "dev-verify-token":
            print_result(var, True, "Using dev token (change for production!)")
            results[var] = True
        else:
            # Mask sensitive values
            if "TOKEN" in var or "SECRET" in var:
                masked = f"{value[:8]}...{value[-4:]}" if len(value) > 12 else "***"
            else:
                masked = value
            print_result(var, True, f"Set ({masked})")
            results[var] = True

    return results


def check_optional_vars() -> None:
    """Check optional environment variables."""
    optional = [
        ("APP_ENV", "development"),
        ("DEBUG", "false"),
        ("PORT", "8000"),
        ("BUSINESS_TIMEZONE", "America/Sao_Paulo"),
        ("GOOGLE_CALENDAR_ID", "primary"),
        ("TYPING_DELAY_SECONDS", "1.5"),
    ]

    for var, default in optional:
        value = os.getenv(var, default)
        print_result(var, True, f"{value}")


def check_google_credentials() -> bool:
    """Verify the Google service account key can be loaded."""
    path = Path(os.getenv("GOOGLE_CREDENTIALS_FILE", "credenciais.json"))
    if not path.is_absolute():
        path = project_root / path

    if not path.is_file():
        print_result("Google credentials", False, f"Not found at {path}")
        return False

    try:
        from google.oauth2 import service_account
        from barberbot.infra.google_calendar import SCOPES

        credentials = service_account.Credentials.from_service_account_file(
            str(path), scopes=SCOPES
        )
        print_result(
            "Google credentials", True, f"Service account {credentials.service_account_email}"
        )
        return True

    except Exception as e:
        print_result("Google credentials", False, str(e)[:50])
        return False


async def check_whatsapp_api() -> bool:
    """Check the access token against the Graph API phone number endpoint."""
    token = os.getenv("WHATSAPP_ACCESS_TOKEN", "")
    phone_id = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    base_url = os.getenv("WHATSAPP_API_URL", "https://graph.facebook.com").rstrip("/")
    version = os.getenv("WHATSAPP_API_VERSION", "v21.0")

    try:
        import httpx

        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(
                f"{base_url}/{version}/{phone_id}",
                headers={"Authorization": f"Bearer {token}"},
            )

            if response.status_code == 200:
                number = response.json().get("display_phone_number", phone_id)
                print_result("WhatsApp Cloud API", True, f"Token valid for {number}")
                return True
            else:
                print_result("WhatsApp Cloud API", False, f"Responded with {response.status_code}")
                return False

    except Exception as e:
        print_result("WhatsApp Cloud API", False, f"Not reachable at {base_url}")
        return False


def check_dependencies() -> bool:
    """Check if required Python packages are installed."""
    required_packages = [
        "fastapi",
        "uvicorn",
        "pydantic",
        "pydantic_settings",
        "httpx",
        "googleapiclient",
        "google.oauth2",
        "google_auth_httplib2",
        "httplib2",
    ]

    missing = []
    for package in required_packages:
        try:
            __import__(package.replace("-", "_"))
        except ImportError:
            missing.append(package)

    if missing:
        print_result("Python packages", False, f"Missing: {', '.join(missing)}")
        return False
    else:
        print_result("Python packages", True, "All required packages installed")
        return True


async def main():
    """Run all verification checks."""
    print("\n" + "="*60)
    print(" Barbearia TwoWell Bot - Setup Verification")
    print("="*60)

    all_passed = True
    critical_failed = False

    # Check .env file
    print_header("Environment File")
    if not check_env_file():
        all_passed = False

    # Check dependencies
    print_header("Python Dependencies")
    if not check_dependencies():
        all_passed = False
        critical_failed = True

    # Check required variables
    print_header("Required Environment Variables")
    var_results = check_required_vars()
    if not all(var_results.values()):
        all_passed = False
        critical_failed = True

    # Check optional variables
    print_header("Optional Environment Variables")
    check_optional_vars()

    # Check credentials and services
    print_header("Credentials and Services")

    if not check_google_credentials():
        all_passed = False
        critical_failed = True

    if var_results.get("WHATSAPP_ACCESS_TOKEN") and var_results.get("WHATSAPP_PHONE_NUMBER_ID"):
        if not await check_whatsapp_api():
            all_passed = False
    else:
        print_result("WhatsApp Cloud API", False, "Skipped - credentials not set")

    # Summary
    print_header("Summary")

    if critical_failed:
        print("\n  \033[91mCRITICAL: Some required checks failed.\033[0m")
        print("  Please fix the issues above before running the bot.")
        print()
        return 1
    elif not all_passed:
        print("\n  \033[93mWARNING: Some optional checks failed.\033[0m")
        print("  The bot may run with limited functionality.")
        print()
        return 0
    else:
        print("\n  \033[92mAll checks passed!\033[0m")
        print("  You can start the bot with:")
        print("    uvicorn barberbot.main:app --reload")
        print()
        return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
