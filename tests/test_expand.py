from __future__ import annotations

from pathlib import Path
import shlex

import pytest

from recipemanager.config import VariableTransform
from recipemanager.domain import Recipe
from recipemanager.errors import ConfigError, InvalidRecipeError
from recipemanager.expand import build_variables, expand_command, substitute
from tests.utils import write_recipe


def _recipe(path: Path) -> Recipe:
    return Recipe(name=path.name, path=path)


def test_reserved_variables(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path / "web" / "recipes", "blog")
    variables = build_variables(_recipe(recipe_dir), base_dir=tmp_path)

    assert variables["folder"] == str(recipe_dir)
    assert variables["folder_basename"] == "blog"
    assert variables["folder_dirname"] == str(tmp_path / "web" / "recipes")
    assert variables["folder_relative"] == str(Path("web") / "recipes" / "blog")


def test_folder_relative_outside_base_is_absolute(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path / "a", "r")
    variables = build_variables(_recipe(recipe_dir), base_dir=tmp_path / "elsewhere")
    assert variables["folder_relative"] == str(recipe_dir)


def test_expand_quotes_substituted_values(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path / "odd dir", "it's")
    command = expand_command("ls ${folder}", _recipe(recipe_dir), base_dir=tmp_path)
    assert command == f"ls {shlex.quote(str(recipe_dir))}"
    assert shlex.split(command) == ["ls", str(recipe_dir)]


def test_braced_placeholder_form(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "blog")
    command = expand_command("echo {${folder_basename}} ${folder_basename}", _recipe(recipe_dir))
    assert command == "echo blog blog"


def test_unknown_placeholders_are_left_verbatim(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "blog")
    command = expand_command("echo ${HOME} {${nope}} ${folder_basename}", _recipe(recipe_dir))
    assert command == "echo ${HOME} {${nope}} blog"


def test_template_without_placeholders_is_unchanged(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "blog")
    template = "drush cr && echo 'done' | tee out.log $HOME"
    assert expand_command(template, _recipe(recipe_dir)) == template


def test_substituted_values_are_not_rescanned() -> None:
    assert substitute("echo ${a}", {"a": "${b}", "b": "boom"}) == "echo '${b}'"


def test_transformations_apply_in_order(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path / "web" / "core" / "recipes", "standard")
    transforms = [
        VariableTransform(name="x", input="folder", search=r"^.*/web/", replace=""),
        VariableTransform(name="y", input="x", search=r"^core/", replace="modules/"),
    ]

    command = expand_command("echo ${x} ${y}", _recipe(recipe_dir), transforms)

    assert command == "echo core/recipes/standard modules/recipes/standard"


def test_reversed_transformations_fall_back_to_literal_input(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path / "web" / "core" / "recipes", "standard")
    transforms = [
        VariableTransform(name="y", input="x", search=r"^core/", replace="modules/"),
        VariableTransform(name="x", input="folder", search=r"^.*/web/", replace=""),
    ]

    variables = build_variables(_recipe(recipe_dir), transforms)

    assert variables["y"] == "x"
    assert variables["x"] == "core/recipes/standard"


def test_transformation_replaces_every_match(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "my_fancy_recipe")
    transforms = [VariableTransform(name="dashed", input="folder_basename", search="_", replace="-")]
    assert expand_command("echo ${dashed}", _recipe(recipe_dir), transforms) == "echo my-fancy-recipe"


def test_transformation_can_override_reserved_variable(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "blog")
    transforms = [VariableTransform(name="folder", input="folder_basename", search="blog", replace="news")]
    assert expand_command("cd ${folder}", _recipe(recipe_dir), transforms) == "cd news"


def test_invalid_transformation_pattern(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "blog")
    transforms = [VariableTransform(name="bad", input="folder", search="(", replace="")]
    with pytest.raises(ConfigError) as excinfo:
        expand_command("echo ${bad}", _recipe(recipe_dir), transforms)
    assert "'bad'" in str(excinfo.value)


def test_missing_directory_is_invalid(tmp_path: Path) -> None:
    with pytest.raises(InvalidRecipeError) as excinfo:
        expand_command("echo ${folder}", _recipe(tmp_path / "gone"))
    assert excinfo.value.recipe == "gone"


def test_missing_descriptor_is_invalid(tmp_path: Path) -> None:
    recipe_dir = write_recipe(tmp_path, "vanished")
    (recipe_dir / "recipe.yml").unlink()
    with pytest.raises(InvalidRecipeError) as excinfo:
        expand_command("echo ${folder}", _recipe(recipe_dir))
    assert "recipe.yml not found" in str(excinfo.value)
