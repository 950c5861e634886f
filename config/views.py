from django.db import DatabaseError, connection
from django.http import JsonResponse


def health_check(request):
    """Liveness check that also verifies the database connection."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError:
        return JsonResponse({'status': 'unhealthy', 'database': 'unreachable'}, status=503)

    return JsonResponse({'status': 'ok', 'database': 'ok'})


def error_404(request, exception):
    return JsonResponse({'error': 'Not found', 'code': 'not_found'}, status=404)


def error_500(request):
    return JsonResponse({'error': 'Internal server error', 'code': 'server_error'}, status=500)
