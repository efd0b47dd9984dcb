from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """Page-number pagination driven by ?page= and ?limit=."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    # Key the current page of records is returned under
    results_key = "results"
    count_key = "count"

    def get_paginated_response(self, data):
        return Response(
            {
                self.results_key: data,
                "total_pages": self.page.paginator.num_pages,
                "current_page": self.page.number,
                self.count_key: self.page.paginator.count,
            }
        )
