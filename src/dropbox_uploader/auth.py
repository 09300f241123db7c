"""Interactive OAuth2 authorization-code flow for Dropbox."""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import urlencode

import click
import httpx

from dropbox_uploader.exceptions import AuthError

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://www.dropbox.com/oauth2/authorize"
TOKEN_URL = "https://api.dropboxapi.com/oauth2/token"


def authorization_url(app_key: str) -> str:
    """URL the user visits to grant the app access."""
    query = urlencode(
        {"response_type": "code", "require_role": "work", "client_id": app_key}
    )
    return f"{AUTHORIZE_URL}?{query}"


class UserInteraction(Protocol):
    """Shows the authorization URL and blocks until the user returns a code."""

    def prompt_for_code(self, url: str) -> str: ...


class ConsoleInteraction:
    """Opens the URL in the default browser and reads the code from stdin."""

    def prompt_for_code(self, url: str) -> str:
        click.launch(url)
        click.echo(
            "Please authorize the uploader to access your Dropbox account "
            "via your Dropbox app"
        )
        click.echo(f"If the browser didn't open, visit: {url}")
        return click.prompt("Once authorized, please paste the authorization code here").strip()


class AuthFlow:
    """Exchanges a user-pasted authorization code for an access token."""

    def __init__(
        self,
        interaction: UserInteraction | None = None,
        http_client: httpx.Client | None = None,
        token_url: str = TOKEN_URL,
    ) -> None:
        self._interaction = interaction or ConsoleInteraction()
        self._http_client = http_client
        self._token_url = token_url

    def authorize(self, app_key: str, app_secret: str) -> str:
        """Run the flow once and return the access token.

        Args:
            app_key: App key of the Dropbox app
            app_secret: App secret of the Dropbox app

        Returns:
            Access token on success

        Raises:
            AuthError: If the token endpoint rejects the code
        """
        code = self._interaction.prompt_for_code(authorization_url(app_key))

        client = self._http_client or httpx.Client()
        try:
            response = client.post(
                self._token_url,
                auth=(app_key, app_secret),
                data={"grant_type": "authorization_code", "code": code},
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Error during authorization with Dropbox: {e}") from e
        finally:
            if self._http_client is None:
                client.close()

        if not 200 <= response.status_code < 400:
            raise AuthError(
                f"Error during authorization with Dropbox: "
                f"{response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            access_token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(
                "Dropbox authorization response did not contain an access token",
                status_code=response.status_code,
                body=response.text,
            ) from e

        logger.info("Successfully authorized access to Dropbox")
        return str(access_token)
