"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class InvalidArgumentError(AdapterError):
    """Malformed adapter configuration or argument."""

    pass


class InvalidCredentialsError(AdapterError):
    """Required application credentials are missing or unusable.

    Raised while the adapter is being constructed.
    """

    pass


class InvalidAuthorizationCodeError(AdapterError):
    """Callback data failed verification or the provider reported an error.

    The flow cannot proceed; the user must start over.
    """

    pass


class AuthorizationDeniedError(InvalidAuthorizationCodeError):
    """The user declined the authorization request."""

    pass


class InvalidAuthorizationStateError(AdapterError):
    """The callback state does not match the one issued with the redirect."""

    pass


class InvalidAccessTokenError(AdapterError):
    """The token endpoint did not return an access token."""

    pass


class TokenVerificationError(AdapterError):
    """An identity token could not be verified against any published key."""

    pass


class ExpiredTokenError(TokenVerificationError):
    """The identity token has expired."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class UnexpectedApiResponseError(ProviderError):
    """Provider data lacks a required field."""

    pass


class UnexpectedValueError(ProviderError):
    """A stored or decoded value is missing or malformed."""

    pass


class HttpClientFailureError(ProviderError):
    """The HTTP request could not be completed (connection, timeout, TLS)."""

    pass


class HttpRequestFailedError(ProviderError):
    """The provider answered with a non-2xx status code."""

    def __init__(self, message: str, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
