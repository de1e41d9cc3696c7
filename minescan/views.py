import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .exceptions import ImageDecodeError
from .forms import ImageInputForm
from .image_processing import decode_data_uri, find_mines

logger = logging.getLogger(__name__)


def _format_errors(form: ImageInputForm) -> str:
    return '; '.join(
        f"{field}: {' '.join(messages)}"
        for field, messages in form.errors.items()
    )


@csrf_exempt
@require_POST
def image_input_view(request):
    """
    Find mines in a base64 PNG Data URI.

    Body: {"min_level": 0-100, "image": "data:image/png;base64,..."}
    Response: {"mines": [{"x": col, "y": row, "level": darkness}, ...]}
    """
    try:
        payload = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Rejected request body: {e}")
        return JsonResponse({'error': f'Invalid JSON body: {e}'}, status=400)

    if not isinstance(payload, dict):
        return JsonResponse({'error': 'Expected a JSON object'}, status=400)

    form = ImageInputForm(payload)
    if not form.is_valid():
        error = _format_errors(form)
        logger.warning(f"Rejected image input: {error}")
        return JsonResponse({'error': error}, status=400)

    try:
        image = decode_data_uri(form.cleaned_data['image'])
    except ImageDecodeError as e:
        logger.warning(f"Could not decode image: {e}")
        return JsonResponse({'error': str(e)}, status=422)

    mines = find_mines(image, form.cleaned_data['min_level'])
    return JsonResponse({'mines': mines})


@require_GET
def healthcheck_view(request):
    return HttpResponse('health', content_type='text/plain')
