import json

import click


class _MutuallyExclusiveOption(click.Option):
    """Click option that is mutually exclusive with another option."""

    def __init__(self, *args, **kwargs):
        self.mutually_exclusive = set(kwargs.pop("mutually_exclusive", []))
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        for name in self.mutually_exclusive:
            if name in opts and self.name in opts:
                raise click.UsageError(
                    f"--{self.name} and --{name} are mutually exclusive."
                )
        return super().handle_parse_result(ctx, opts, args)


def _source(media, proxy):
    from clipsidecar.store import ClipSource
    return ClipSource.from_media_paths(media, proxy_path=proxy)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug output.", cls=_MutuallyExclusiveOption, mutually_exclusive=["quiet"])
@click.option("--quiet", "-q", is_flag=True, default=False, help="Suppress all output except errors.", cls=_MutuallyExclusiveOption, mutually_exclusive=["verbose"])
@click.option("--log-file", default=None, type=click.Path(), help="Write structured log to file.")
@click.option("--preset", default="default", help="Load store settings from a named preset (e.g. default, legacy).")
@click.option("--preset-dir", multiple=True, type=click.Path(file_okay=False), help="Extra directory to search for presets. Repeatable.")
@click.pass_context
def cli(ctx, verbose, quiet, log_file, preset, preset_dir):
    """Read and update clip metadata in JSON sidecar files."""
    from pathlib import Path
    from clipsidecar.ui import Console
    from clipsidecar.logging_config import setup_logging
    from clipsidecar.config import load_store_config
    from clipsidecar.store import SidecarStore

    ctx.ensure_object(dict)
    ctx.obj["preset_dirs"] = [Path(d) for d in preset_dir]
    ctx.obj["console"] = Console(quiet=quiet, verbose=verbose)
    ctx.obj["logger"] = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    try:
        config = load_store_config(preset, search_dirs=ctx.obj["preset_dirs"])
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    ctx.obj["store"] = SidecarStore(config)


@cli.command()
@click.argument("media")
@click.option("--proxy", default=None, help="Proxy media path; its folder is searched first.")
@click.pass_context
def show(ctx, media, proxy):
    """Print the metadata record for a clip as JSON."""
    store = ctx.obj["store"]
    source = _source(media, proxy)
    record = store.read(source)
    if record is None:
        raise click.ClickException(f"No metadata found for {source.filename}")
    click.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


@cli.command(name="set")
@click.argument("media")
@click.option("--proxy", default=None, help="Proxy media path; its folder is written first.")
@click.option("--location", default=None, help="Where the shot takes place.")
@click.option("--subject", default=None, help="What the shot is of.")
@click.option("--action", default=None, help="What happens in the shot.")
@click.option("--shot-type", default=None, help="Framing (e.g. ESTAB, CU, MID).")
@click.option("--shot-number", default=None, type=int, help="Shot number; 0 removes the suffix.")
@click.option("--keyword", "-k", multiple=True, help="Keyword. Repeatable; replaces the existing list.")
@click.option("--lock", multiple=True, help="Field name to mark as locked. Repeatable; replaces the existing list.")
@click.option("--good/--not-good", default=None, help="Mark the clip as a keeper, or as not one.")
@click.pass_context
def set_fields(ctx, media, proxy, location, subject, action, shot_type, shot_number, keyword, lock, good):
    """Update metadata fields for a clip and recompute its shot name."""
    from clipsidecar.store import apply_metadata_update

    updates = {
        "location": location,
        "subject": subject,
        "action": action,
        "shotType": shot_type,
        "shotNumber": shot_number,
        "good": good,
        "keywords": list(keyword) or None,
        "lockedFields": list(lock) or None,
    }
    updates = {k: v for k, v in updates.items() if v is not None}
    if not updates:
        raise click.UsageError("Provide at least one field to update.")

    console = ctx.obj["console"]
    store = ctx.obj["store"]
    source = _source(media, proxy)
    if not apply_metadata_update(source, updates, store=store):
        raise click.ClickException(f"Could not write metadata for {source.filename}")
    record = store.read(source)
    console.info(f"{source.filename}: {record.shotName if record else ''}")


@cli.command()
@click.argument("media", nargs=-1, required=True)
@click.option("--proxy-dir", default=None, type=click.Path(file_okay=False), help="Folder holding proxies for all given clips.")
@click.pass_context
def reapply(ctx, media, proxy_dir):
    """Re-write each clip's fields so its shot name is recomputed."""
    import os
    from clipsidecar.batch import apply_batch

    console = ctx.obj["console"]
    store = ctx.obj["store"]
    sources = []
    for path in media:
        proxy = os.path.join(proxy_dir, os.path.basename(path)) if proxy_dir else None
        sources.append(_source(path, proxy))

    def progress(tracker, source):
        console.debug(f"{tracker.render()}: {source.filename}")

    summary = apply_batch(store, sources, on_progress=progress, step_name="Reapply")
    for item, reason in summary.failures:
        console.error(f"  {item}: {reason}")
    console.info(summary.render())
    if summary.failed:
        ctx.exit(1)


@cli.command(name="presets")
@click.pass_context
def list_presets_cmd(ctx):
    """List the store presets that --preset can load."""
    from clipsidecar.config import list_presets

    for name in list_presets(ctx.obj["preset_dirs"]):
        click.echo(name)


if __name__ == "__main__":
    cli()
