"""macOS-on-KVM host provisioning (Python-first, convergence-driven).

Core design goals:
- Safe to re-run: every step checks host state before acting
- One operator interface for all prompts
- External tools behind small capability interfaces
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
