"""Version information for the stark_accessibility library."""


class LibraryVersion:
    # semantic version, sent as the payload "version"
    current = "0.0.1"

    build = "1"

    full_version = f"{current}+{build}"

    user_agent = f"StarkAccessibilityIOS/{current}"
