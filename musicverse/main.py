"""
Main CLI interface for Music Verse

Command-line entry points for filling the music directory and maintaining the
song manifest the player reads:

- download: fetch one video or playlist with yt-dlp
- generate: rebuild music_list.json from the music directory
- sync: process every URL in downloads.json, then rebuild the manifest
- library: load the manifest through the player and print the song list
- config: inspect the effective settings
"""

import sys
import click
import functools
import yaml

from . import __version__
from .config.settings import get_settings, reload_settings
from .download.batch import BatchSynchronizer
from .download.downloader import AudioDownloader, reset_downloader
from .exceptions import BatchConfigError, ConfigError
from .library.generator import ManifestGenerator
from .player.console import ConsoleView
from .player.controller import Player
from .player.interfaces import NullAudioBackend
from .player.preferences import MemoryPreferenceStore
from .utils.logger import configure_from_settings, get_logger
from .utils.validation import validate_source_url, validate_music_directory


logger = get_logger(__name__)


def print_banner():
    banner = """
╔═══════════════════════════════════════════════════╗
║                    Music Verse                    ║
║                                                   ║
║   Download audio, build the library, press play   ║
║                                                   ║
╚═══════════════════════════════════════════════════╝
    """
    click.echo(click.style(banner, fg='magenta', bold=True))


def handle_error(func):
    """
    Decorator to handle common CLI errors gracefully

    Uncaught errors become a red message and exit code 1; Ctrl-C exits with 130.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)  # Standard exit code for SIGINT
        except click.exceptions.Exit:
            raise
        except Exception as e:
            logger.debug(f"Command failed: {e}", exc_info=True)
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    Music Verse - a local music library and player toolkit
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"Music Verse {__version__}")
        return

    try:
        if config:
            reload_settings(config)
            reset_downloader()
        settings = get_settings()
    except ConfigError as e:
        click.echo(click.style(f"Config error: {e}", fg='red'), err=True)
        sys.exit(1)

    if verbose:
        settings.logging.level = 'DEBUG'
        ctx.obj['verbose'] = True

    configure_from_settings()
    logger.debug(f"Using {settings}")

    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


@cli.command()
@click.argument('url')
@click.option('--playlist', '-p', is_flag=True, help='Download every entry of a playlist URL')
@click.option('--output', '-o', type=click.Path(file_okay=False), help='Music directory override')
@handle_error
def download(url, playlist, output):
    """
    Download audio for a single video or playlist URL

    A failed download is reported but does not change the exit status.
    """
    is_valid, error_msg = validate_source_url(url)
    if not is_valid:
        click.echo("Usage: musicverse download <url> [--playlist]")
        click.echo(click.style(f"Invalid URL: {error_msg}", fg='red'), err=True)
        sys.exit(1)

    if output:
        is_valid, error_msg = validate_music_directory(output)
        if not is_valid:
            click.echo(click.style(f"Invalid music directory: {error_msg}", fg='red'), err=True)
            sys.exit(1)

    logger.console_info(f"🎵 Starting download for: {url}")
    logger.console_info(f"📂 Mode: {'Playlist' if playlist else 'Single Song'}")
    logger.console_info("⏳ This may take a moment...")

    downloader = AudioDownloader(music_directory=output)
    result = downloader.download(url, playlist=playlist)

    if result.success:
        logger.console_info("✅ Download complete!")
        logger.console_info('👉 Run "musicverse generate" to update your music list.')
    else:
        logger.console_info("⚠️ Download failed; see the message above. Nothing was added to the music list.")


@cli.command()
@click.option('--flat', is_flag=True, help='Write a bare list of filenames instead of songs + stats')
@click.option('--sort', 'sort_songs', is_flag=True, help='Sort songs by name instead of directory order')
@handle_error
def generate(flat, sort_songs):
    """
    Rebuild the song manifest from the music directory
    """
    generator = ManifestGenerator(sort_songs=True if sort_songs else None)
    manifest = generator.write('flat' if flat else 'enriched')

    logger.console_info(f"✅ Generated music list with {len(manifest.songs)} songs.")
    logger.console_info(f"Pushed to: {generator.manifest_path}")


@cli.command()
@click.option('--config-file', type=click.Path(dir_okay=False), help='Batch configuration (downloads.json)')
@click.option('--no-progress', is_flag=True, help='Disable the progress bar')
@handle_error
def sync(config_file, no_progress):
    """
    Download every URL in the batch configuration, then refresh the manifest
    """
    synchronizer = BatchSynchronizer(config_path=config_file, show_progress=not no_progress)
    try:
        report = synchronizer.run()
    except BatchConfigError:
        # Already reported by the synchronizer
        sys.exit(1)

    if report.failed:
        logger.console_info(f"⚠️ {report.failed} URL(s) failed; see the log for details")


@cli.command()
@click.option('--search', '-s', default='', help='Only show songs containing this text')
@click.option('--manifest', 'manifest_source', help='Manifest path or URL')
@handle_error
def library(search, manifest_source):
    """
    Show the song list as the player sees it
    """
    view = ConsoleView()
    player = Player(
        NullAudioBackend(),
        view=view,
        manifest_source=manifest_source,
        preferences=MemoryPreferenceStore()
    )

    if not player.fetch_library():
        view.echo()
        sys.exit(1)

    if search:
        player.filter_library(search)
    view.echo()


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command('show')
@handle_error
def config_show():
    """Print the effective settings"""
    settings = get_settings()
    click.echo(yaml.safe_dump(settings.to_dict(), default_flow_style=False, sort_keys=False))

    problems = settings.validate()
    for problem in problems:
        click.echo(click.style(f"  - {problem}", fg='yellow'))
    if problems:
        sys.exit(1)


def main():
    cli()


if __name__ == '__main__':
    main()
