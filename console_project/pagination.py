"""
Page-number pagination for the function views.

List endpoints return a plain serialized list and let ``auto_paginate`` cut
it into a page; the revision log is large enough to be paginated as a
queryset with ``paginate_queryset`` instead.

Both answer with the page inside the success envelope:

    {"status": "success", "message": "",
     "data": {"count": 4, "next": "...?page=2", "previous": null, "results": [...]}}
"""
from functools import wraps

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from console_project.response_formatter import envelope


class ConsolePagination(PageNumberPagination):
    """``page`` and ``page_size`` (20 by default, at most 100)."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response(envelope('success', data={
            'count': self.page.paginator.count,
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
        }))


def auto_paginate(view_func):
    """
    Paginate list bodies of GET responses; everything else passes through.

        @api_view(['GET', 'POST'])
        @require_permission(Module.DEPARTMENT_MANAGEMENT)
        @auto_paginate
        def department_list(request):
            ...
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        response = view_func(request, *args, **kwargs)
        if request.method != 'GET' or not isinstance(response, Response):
            return response
        if not isinstance(response.data, list):
            return response

        paginator = ConsolePagination()
        page = paginator.paginate_queryset(response.data, request)
        if page is None:
            return response
        return paginator.get_paginated_response(page)

    return wrapper


def paginate_queryset(request, queryset, serializer_class, **serializer_kwargs):
    """Slice ``queryset`` to the requested page before serializing it."""
    paginator = ConsolePagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = serializer_class(page, many=True, **serializer_kwargs)
    return paginator.get_paginated_response(serializer.data)
