from rest_framework.routers import SimpleRouter


class OptionalSlashRouter(SimpleRouter):
    """
    SimpleRouter that accepts every route with or without a trailing slash.

    Clients call `/api/orders` and `/api/orders/` interchangeably. Without
    this, APPEND_SLASH redirects the slashless form and a redirected POST
    arrives as a GET.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.trailing_slash = "/?"
