from importlib.metadata import PackageNotFoundError, version


def user_agent_value() -> str:
    return f"xhttp/{package_version()}"


def package_version() -> str:
    try:
        return version("xhttp")
    except PackageNotFoundError:
        return "0.0.0"


__all__ = ["package_version", "user_agent_value"]
