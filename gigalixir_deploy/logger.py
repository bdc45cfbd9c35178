import logging

ROOT_LOGGER = "gigalixir_deploy"


def setup_logging(level="INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                       format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')


def get_logger(name):
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def mask(text, secrets):
    """Replace every secret value in text with ***"""
    for secret in secrets:
        if secret:
            text = text.replace(secret, "***")
    return text
