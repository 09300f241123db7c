"""Command-line interface for dropbox_uploader."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from dropbox_uploader import (
    AppCredentials,
    DropboxUploader,
    DropboxUploaderError,
    build_request,
    validate_app_key,
    validate_app_secret,
    validate_keychain,
)


def get_uploader() -> DropboxUploader:
    """Create the DropboxUploader used by the commands."""
    return DropboxUploader()


def _fail(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.version_option(package_name="dropbox-uploader")
@click.option("--verbose", "-v", is_flag=True, help="Log progress information")
def main(verbose: bool) -> None:
    """Dropbox uploader - Upload build artifacts to Dropbox."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--dropbox-path",
    "-d",
    envvar="DROPBOX_PATH",
    help="Path to the destination Dropbox folder",
)
@click.option(
    "--write-mode",
    "-m",
    envvar="DROPBOX_WRITE_MODE",
    help="Write mode of the uploaded file: add, overwrite or update (default: add)",
)
@click.option(
    "--update-rev",
    envvar="DROPBOX_UPDATE_REV",
    help="Revision of the file replaced in update write mode",
)
@click.option("--app-key", envvar="DROPBOX_APP_KEY", help="App Key of your Dropbox app")
@click.option("--app-secret", envvar="DROPBOX_APP_SECRET", help="App Secret of your Dropbox app")
@click.option(
    "--keychain",
    envvar="DROPBOX_KEYCHAIN",
    help="Credential store holding the access token (default: platform default)",
)
@click.option(
    "--keychain-password",
    envvar="DROPBOX_KEYCHAIN_PASSWORD",
    help="Password to unlock the keychain. Asked for if not provided",
)
def upload(
    file_path: Path,
    dropbox_path: str | None,
    write_mode: str | None,
    update_rev: str | None,
    app_key: str | None,
    app_secret: str | None,
    keychain: str | None,
    keychain_password: str | None,
) -> None:
    """Upload a file to Dropbox.

    FILE_PATH: The file to upload.

    Examples:

        dropbox-upload upload build/App.ipa --dropbox-path "/Builds/iOS"

        dropbox-upload upload App.apk -m update --update-rev a1c10ce0dd78
    """
    try:
        request = build_request(
            file_path,
            app_key,
            app_secret,
            dropbox_path=dropbox_path,
            write_mode=write_mode,
            update_rev=update_rev,
            keychain=keychain,
            keychain_password=keychain_password,
        )
        click.echo(f"Starting upload of {request.file_path} to Dropbox")
        result = get_uploader().run(request)
    except DropboxUploaderError as e:
        _fail(f"Upload failed: {e}")
    except Exception as e:
        _fail(f"Error: {e}")
    else:
        click.echo(click.style(f"File revision: '{result.revision}'", fg="green"))
        click.echo(
            click.style(
                f"Successfully uploaded file to Dropbox at '{result.remote_path}'", fg="green"
            )
        )


@main.command()
@click.option("--app-key", envvar="DROPBOX_APP_KEY", help="App Key of your Dropbox app")
@click.option("--app-secret", envvar="DROPBOX_APP_SECRET", help="App Secret of your Dropbox app")
@click.option(
    "--keychain", envvar="DROPBOX_KEYCHAIN", help="Credential store for the access token"
)
@click.option(
    "--keychain-password",
    envvar="DROPBOX_KEYCHAIN_PASSWORD",
    help="Password to unlock the keychain",
)
def login(
    app_key: str | None,
    app_secret: str | None,
    keychain: str | None,
    keychain_password: str | None,
) -> None:
    """Authorize access to Dropbox and store the access token."""
    try:
        credentials = AppCredentials(
            app_key=validate_app_key(app_key),
            app_secret=validate_app_secret(app_secret),
        )
        get_uploader().authorize(credentials, validate_keychain(keychain), keychain_password)
    except DropboxUploaderError as e:
        _fail(f"Login failed: {e}")
    except Exception as e:
        _fail(f"Error: {e}")
    else:
        click.echo(click.style("Login successful!", fg="green"))


if __name__ == "__main__":
    main()
