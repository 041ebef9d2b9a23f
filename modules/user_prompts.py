"""Console output helpers for consistent, color-coded CLI messages.

Features:
- Color-coded output (success, warning, error, info)
- Headers, sections and separators with consistent dividers
- Windows color support via colorama
"""

from __future__ import annotations

import colorama

from modules.constants import DIVIDER_CHAR, DIVIDER_LENGTH

colorama.just_fix_windows_console()


# ============================================================================
# ANSI Color Codes
# ============================================================================
class Colors:
    """ANSI color codes for terminal output formatting."""
    HEADER = colorama.Fore.MAGENTA
    OKBLUE = colorama.Fore.BLUE
    OKCYAN = colorama.Fore.CYAN
    OKGREEN = colorama.Fore.GREEN
    WARNING = colorama.Fore.YELLOW
    FAIL = colorama.Fore.RED
    BOLD = colorama.Style.BRIGHT
    DIM = colorama.Style.DIM
    ENDC = colorama.Style.RESET_ALL


# ============================================================================
# Output Functions
# ============================================================================
def print_header(message: str, subtitle: str = "") -> None:
    """Print a prominent header message with optional subtitle."""
    print(f"\n{Colors.BOLD}{Colors.HEADER}{'=' * DIVIDER_LENGTH}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.HEADER}  {message}{Colors.ENDC}")
    if subtitle:
        print(f"{Colors.OKCYAN}  {subtitle}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.HEADER}{'=' * DIVIDER_LENGTH}{Colors.ENDC}\n")


def print_section(message: str) -> None:
    """Print a section divider with message."""
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}{DIVIDER_CHAR * DIVIDER_LENGTH}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.OKBLUE}{message}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.OKBLUE}{DIVIDER_CHAR * DIVIDER_LENGTH}{Colors.ENDC}\n")


def print_success(message: str) -> None:
    """Print a success message."""
    print(f"{Colors.OKGREEN}✓ {message}{Colors.ENDC}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    print(f"{Colors.WARNING}⚠ {message}{Colors.ENDC}")


def print_error(message: str) -> None:
    """Print an error message."""
    print(f"{Colors.FAIL}✗ {message}{Colors.ENDC}")


def print_info(message: str) -> None:
    """Print an info message."""
    print(f"{Colors.OKCYAN}ℹ {message}{Colors.ENDC}")


def print_dim(message: str) -> None:
    """Print a dimmed/secondary message."""
    print(f"{Colors.DIM}{message}{Colors.ENDC}")


def print_separator(char: str = "-", length: int = DIVIDER_LENGTH) -> None:
    """Print a dimmed separator line."""
    print(f"{Colors.DIM}{char * length}{Colors.ENDC}")


__all__ = [
    "Colors",
    "print_header",
    "print_section",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "print_dim",
    "print_separator",
]
