"""Command-line interface for interacting with the assistant."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Tuple

import typer

from core import ConversationLog, build_assistant, load_profile
from core.dispatcher import DispatchResult, SkillDispatcher

app = typer.Typer(help="Интерактивный CLI для общения с ассистентом.")


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_dispatcher(profile: str) -> Tuple[SkillDispatcher, Dict[str, Any]]:
    try:
        config = load_profile(profile)
    except FileNotFoundError as exc:
        typer.secho(f"Профиль '{profile}' не найден: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except Exception as exc:  # pragma: no cover - ошибка разбора профиля
        typer.secho(f"Не удалось загрузить профиль '{profile}': {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return build_assistant(config), config


def _echo_result(dispatcher: SkillDispatcher, text: str, result: DispatchResult, debug: bool) -> None:
    label = result.skill_name if result.matched else "assistant"
    typer.echo(f"[{label}] {result.response}")

    if debug:
        decision = dispatcher.match(text)
        if decision is not None:
            typer.secho(
                f"[DEBUG] Навык: {decision.skill.name}, стратегия: {decision.strategy}, "
                f"триггер: {decision.trigger!r}, аргумент: {decision.argument!r}",
                fg=typer.colors.BLUE,
            )
        if result.matched:
            typer.secho(
                "[DEBUG] Данные навыка: "
                + json.dumps(result.data or {}, ensure_ascii=False, indent=2),
                fg=typer.colors.BLUE,
            )


@app.command()
def chat(
    profile: str = typer.Option("default", "--profile", "-p", help="Имя конфигурационного профиля."),
    debug: bool = typer.Option(
        False, "--debug", help="Выводить диагностическую информацию после ответа."
    ),
) -> None:
    """Запустить интерактивный чат с ассистентом."""

    _configure_logging(debug)
    dispatcher, config = _load_dispatcher(profile)
    history = ConversationLog(max_length=int(config.get("app", {}).get("history_limit", 100)))

    typer.echo("Введите сообщение для ассистента. Пустая строка или команда /exit завершит работу.")

    with dispatcher:
        while True:
            try:
                user_input = input("> ")
            except EOFError:  # pragma: no cover - интерактивный ввод
                typer.echo()
                break
            except KeyboardInterrupt:  # pragma: no cover - интерактивный ввод
                typer.echo("\nВыход по запросу пользователя.")
                break

            trimmed = user_input.strip()
            if not trimmed or trimmed == "/exit":
                typer.echo("Завершение работы CLI.")
                break

            history.add_user_message(trimmed)
            result = dispatcher.route(trimmed)
            history.add_dispatch_result(result)
            _echo_result(dispatcher, trimmed, result, debug)


@app.command()
def ask(
    text: str = typer.Argument(..., help="Сообщение для ассистента."),
    profile: str = typer.Option("default", "--profile", "-p", help="Имя конфигурационного профиля."),
    debug: bool = typer.Option(False, "--debug", help="Выводить диагностическую информацию."),
    as_json: bool = typer.Option(False, "--json", help="Вывести результат в формате JSON."),
) -> None:
    """Отправить одно сообщение и вывести ответ."""

    _configure_logging(debug)
    dispatcher, _ = _load_dispatcher(profile)
    with dispatcher:
        result = dispatcher.route(text)
        if as_json:
            typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
            return
        _echo_result(dispatcher, text, result, debug)


@app.command("skills")
def list_skills(
    profile: str = typer.Option("default", "--profile", "-p", help="Имя конфигурационного профиля."),
) -> None:
    """Показать зарегистрированные навыки в порядке маршрутизации."""

    _configure_logging(False)
    dispatcher, _ = _load_dispatcher(profile)
    with dispatcher:
        for skill in dispatcher.skills:
            phrases = ", ".join(skill.natural_language_triggers) or "-"
            typer.echo(f"{skill.usage:<22} {skill.description}")
            typer.echo(f"{'':<22} фразы: {phrases}")


if __name__ == "__main__":  # pragma: no cover - точка входа для запуска модуля
    app()
