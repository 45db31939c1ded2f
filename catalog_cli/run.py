# -*- coding: utf-8 -*-
import asyncio
import mimetypes
import typing as t
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from catalog_server.controller import CatalogController
from catalog_server.errors import CatalogError, ReplaceError
from catalog_server.log import configure_logging
from catalog_server.messages import message
from catalog_server.models import ITEM_KINDS, Course, Item


console = Console()

KIND = click.Choice(list(ITEM_KINDS))


def truncate(text: str, max_length: int = 40) -> str:
    """Truncate text to max_length characters, adding ellipsis if needed."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def create_gallery_table(courses: list[Course]) -> Table:
    """One row per course with instructors, days and progress counters."""
    table = Table(title="📚 Courses", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Course", style="white")
    table.add_column("Doctor / TA", style="cyan")
    table.add_column("Days", style="yellow")
    table.add_column("Uploaded", justify="right")
    table.add_column("Progress", justify="right", style="green")

    for course in courses:
        progress = course.progress
        people = course.doctor + (f"\n{course.ta_name}" if course.ta_name else "")
        days = (course.lecture_day or "-") + " / " + (course.section_day or "-")
        done = "✅ " if progress.is_complete else ""
        table.add_row(
            course.id,
            f"{course.name_ar}\n[dim]{course.name_en}[/dim]",
            people,
            days,
            f"L {progress.uploaded_lectures}/{progress.total_lectures}\n"
            f"S {progress.uploaded_sections}/{progress.total_sections}",
            f"{done}{progress.completed_items}/{progress.total_items}",
        )
    return table


def create_items_table(title: str, items: list[Item], no_file: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("", width=2)
    table.add_column("Name", style="white")
    table.add_column("File", style="cyan")
    table.add_column("ID", style="dim", overflow="fold")
    for item in items:
        table.add_row(
            "✔" if item.completed else "○",
            item.name,
            truncate(item.file.name) if item.file else f"[dim]{no_file}[/dim]",
            item.id,
        )
    return table


def show_error(error: CatalogError) -> t.NoReturn:
    """Print the failure notice and exit non-zero."""
    text = Text(error.user_message)
    if isinstance(error, ReplaceError):
        text.append("\n\nRun `catalog list` to see the stored state.", style="dim")
    title = f"❌ {error.operation}" if error.operation else "❌ Error"
    console.print(Panel(text, title=title, border_style="red"))
    raise SystemExit(1)


def run_action(
    action: t.Callable[[CatalogController], t.Awaitable[t.Any]],
    load: bool = True,
) -> t.Any:
    """Build a controller, optionally load the catalog, run ``action`` and close everything."""

    async def _run() -> t.Any:
        controller = CatalogController.from_env()
        try:
            if load:
                with console.status("[bold green]Loading courses..."):
                    await controller.load()
            return await action(controller)
        finally:
            await controller.aclose()

    try:
        return asyncio.run(_run())
    except CatalogError as e:
        show_error(e)


def read_file(path_str: str) -> tuple[str, bytes, str]:
    path = Path(path_str)
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, path.read_bytes(), media_type


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool) -> None:
    """Track course materials and import schedules from PDF."""
    configure_logging(verbose)


@main.command("list")
def list_courses() -> None:
    """Show the course gallery."""

    async def action(controller: CatalogController) -> list[Course]:
        return controller.courses

    courses = run_action(action)
    if not courses:
        console.print(Panel("No courses yet. Import a PDF schedule or reset to the defaults.", border_style="yellow"))
        return
    console.print(create_gallery_table(courses))


@main.command()
@click.argument("course_id")
def show(course_id: str) -> None:
    """Show one course with its lectures and sections."""

    async def action(controller: CatalogController) -> tuple[Course, str]:
        return controller.select_course(course_id), message("no_file", controller.language)

    course, no_file = run_action(action)
    header = Text(course.name_ar, style="bold")
    header.append(f"  {course.name_en}\n", style="dim")
    header.append(course.doctor, style="cyan")
    if course.ta_name:
        header.append(f"  ({course.ta_name})", style="cyan")
    console.print(Panel(header, border_style="blue"))
    console.print(create_items_table("Lectures", course.lectures, no_file))
    console.print(create_items_table("Sections", course.sections, no_file))


@main.command("import")
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
def import_schedule(pdf_path: str) -> None:
    """Replace all courses with the ones extracted from a schedule PDF."""
    name, content, media_type = read_file(pdf_path)

    async def action(controller: CatalogController) -> tuple[list[Course], str]:
        with console.status(f"[bold green]Analyzing {name}..."):
            courses = await controller.import_schedule(name, content, media_type)
        return courses, message("import_succeeded", controller.language)

    courses, success = run_action(action, load=False)
    console.print(f"\n[bold green]✅ {success}[/bold green]")
    console.print(create_gallery_table(courses))


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def reset(yes: bool) -> None:
    """Replace all courses with the default schedule."""
    confirmed = yes or click.confirm(message("confirm_reset"), default=False)
    if not confirmed:
        console.print(f"[yellow]{message('reset_not_confirmed')}[/yellow]")
        return

    async def action(controller: CatalogController) -> list[Course]:
        with console.status("[bold green]Resetting schedule..."):
            return await controller.reset_schedule(confirm=True)

    console.print(create_gallery_table(run_action(action, load=False)))


@main.command()
@click.argument("course_id")
@click.argument("kind", type=KIND)
@click.argument("item_id")
def toggle(course_id: str, kind: str, item_id: str) -> None:
    """Mark a lecture or section complete (or incomplete again)."""

    async def action(controller: CatalogController) -> Item:
        return await controller.toggle_complete(course_id, kind, item_id)

    item = run_action(action)
    state = "[green]completed[/green]" if item.completed else "[yellow]not completed[/yellow]"
    console.print(f"{item.name}: {state}")


@main.command()
@click.argument("course_id")
@click.argument("kind", type=KIND)
def add(course_id: str, kind: str) -> None:
    """Add the next numbered lecture or section."""

    async def action(controller: CatalogController) -> Item:
        return await controller.add_item(course_id, kind)

    item = run_action(action)
    console.print(f"[green]Added[/green] {item.name} [dim]({item.id})[/dim]")


@main.command()
@click.argument("course_id")
@click.argument("kind", type=KIND)
@click.argument("item_id")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
def attach(course_id: str, kind: str, item_id: str, file_path: str) -> None:
    """Upload a file for a lecture or section, replacing any previous one."""
    name, content, media_type = read_file(file_path)

    async def action(controller: CatalogController):
        with console.status(f"[bold green]Uploading {name}..."):
            return await controller.attach_file(course_id, kind, item_id, name, content, media_type)

    file_object = run_action(action)
    console.print(f"[green]Uploaded[/green] {file_object.name} → {file_object.public_url}")


@main.command()
@click.argument("course_id")
@click.argument("kind", type=KIND)
@click.argument("item_id")
@click.option("--open", "open_file", is_flag=True, help="Open the file in the default viewer")
def view(course_id: str, kind: str, item_id: str, open_file: bool) -> None:
    """Show where an item's file lives and how it can be displayed."""

    async def action(controller: CatalogController):
        return controller.view_file(course_id, kind, item_id), message("no_file", controller.language)

    file_object, no_file = run_action(action)
    if file_object is None:
        console.print(f"[dim]{no_file}[/dim]")
        return

    mode = file_object.viewer_mode
    console.print(Panel(
        f"{file_object.public_url}\n[dim]{file_object.type or 'unknown type'} · {mode}[/dim]",
        title=file_object.name,
        border_style="blue",
    ))
    if open_file:
        # images and PDFs open inline in a browser; anything else is downloaded
        click.launch(file_object.public_url)


if __name__ == "__main__":
    main()
