"""
Google Cloud Function for generating resized images.
This function creates resized copies of original images uploaded to a bucket.
"""

import time
from typing import Dict, Any

from pydantic import ValidationError

from image_resizer.core import state
from image_resizer.core.logging import setup_logging
from image_resizer.handlers.finalize import build_response, handle_finalize_event

# Configure logging
logger = setup_logging()

# Initialize settings, storage client and image processor once per instance
app_state = state.init()


def generate_resized_images(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Cloud Function entry point for google.storage.object.finalize events.

    Never raises, so permanent failures do not trigger retry loops.

    Args:
        event: Storage object payload ({"bucket", "name", "contentType", ...})
        context: Cloud Function context (optional)

    Returns:
        Dictionary with processing results
    """
    start_time = time.time()

    try:
        if context is not None:
            logger.info(f"Event {getattr(context, 'event_id', '')} of type {getattr(context, 'event_type', '')}")

        result = handle_finalize_event(event, app_state)
        return build_response(result, time.time() - start_time)

    except Exception as e:
        # Log error
        logger.error(f"Error generating resized images: {str(e)}", exc_info=True)

        # Return error response
        return {
            "status": "error",
            "source": event.get("name") if isinstance(event, dict) else None,
            "error": str(e),
            "processing_time": time.time() - start_time,
        }


# HTTP entry point for direct invocation
def generate_resized_images_http(request):
    """
    HTTP entry point for direct Cloud Function invocation.

    Args:
        request: HTTP request object with the storage object payload as JSON

    Returns:
        HTTP response with processing results
    """
    start_time = time.time()
    request_json = request.get_json(silent=True)

    if not request_json:
        return {"error": "No JSON data in request"}, 400

    try:
        result = handle_finalize_event(request_json, app_state)
    except ValidationError as e:
        return {"error": f"Invalid storage event: {str(e)}"}, 400
    except Exception as e:
        logger.error(f"Error in HTTP handler: {str(e)}", exc_info=True)
        return {"error": str(e)}, 500

    return build_response(result, time.time() - start_time), 200
