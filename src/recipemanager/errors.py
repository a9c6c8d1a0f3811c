class RecipeManagerError(Exception):
    pass


class ConfigError(RecipeManagerError):
    pass


class RecipeNotFoundError(RecipeManagerError):
    def __init__(self, recipe: str) -> None:
        super().__init__(f"Recipe '{recipe}' not found")
        self.recipe = recipe


class CommandNotFoundError(RecipeManagerError):
    def __init__(self, command: str) -> None:
        super().__init__(f"Command '{command}' not found in configuration")
        self.command = command


class InvalidRecipeError(RecipeManagerError):
    def __init__(self, recipe: str, reason: str) -> None:
        super().__init__(f"Recipe '{recipe}' is invalid: {reason}")
        self.recipe = recipe
        self.reason = reason


class LaunchError(RecipeManagerError):
    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Failed to launch '{command}': {reason}")
        self.command = command
        self.reason = reason


class NonZeroExitError(RecipeManagerError):
    def __init__(self, recipe: str, exit_code: int) -> None:
        super().__init__(f"Recipe '{recipe}' failed with exit code {exit_code}")
        self.recipe = recipe
        self.exit_code = exit_code


class CircularDependencyError(RecipeManagerError):
    def __init__(self, recipe: str, path: list[str]) -> None:
        chain = " -> ".join([*path, recipe])
        super().__init__(f"Circular dependency detected: {recipe} ({chain})")
        self.recipe = recipe
        self.path = list(path)
