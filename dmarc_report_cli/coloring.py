from colorama import Fore, Style


class Palette:
    """Wraps text in ANSI color codes unless disabled."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _wrap(self, color: str, text: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def red(self, text: str) -> str:
        return self._wrap(Fore.RED, text)

    def green(self, text: str) -> str:
        return self._wrap(Fore.GREEN, text)

    def yellow(self, text: str) -> str:
        return self._wrap(Fore.YELLOW, text)

    def magenta(self, text: str) -> str:
        return self._wrap(Fore.MAGENTA, text)

    def cyan(self, text: str) -> str:
        return self._wrap(Fore.CYAN, text)

    def outcome(self, text: str, passed: bool) -> str:
        return self.green(text) if passed else self.red(text)

    def percentage(self, pct: float) -> str:
        text = f"{pct:.2f}"
        if pct < 20:
            return self.red(text)
        if pct < 40:
            return self.magenta(text)
        if pct < 60:
            return self.yellow(text)
        if pct < 80:
            return self.green(text)
        return self.cyan(text)
