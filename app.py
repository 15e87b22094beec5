import logging
import sys
import time

from flask import Flask, request, jsonify
from flask_cors import CORS

import config
import relay
import resolver
from errors import InvalidInput, ServiceError

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = Flask(__name__)
CORS(app, origins=config.CORS_ORIGINS)


def _requested_url():
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidInput("Request body must be a JSON object.")
        return data.get("url")
    return request.values.get("url")


# Root route (for browser check)
@app.route('/')
def home():
    return "Video Downloader Backend Running!"


@app.route('/health')
def health():
    return jsonify({"status": "ok", "uptime": time.monotonic() - STARTED_AT})


# Resolve a page URL to a direct media URL
@app.route('/download-info', methods=['POST'])
def download_info():
    try:
        resolved = resolver.resolve(_requested_url())
    except ServiceError as e:
        logger.error("Error in /download-info: %s (%s)", e.message, e.details or "no details")
        body = {"success": False, "error": e.message}
        if e.details:
            body["details"] = e.details
        return jsonify(body), e.status
    except Exception as e:
        logger.exception("Unexpected error in /download-info")
        return jsonify({"success": False, "error": "Internal server error.", "details": str(e)}), 500

    return jsonify({
        "success": True,
        "downloadUrl": resolved.direct_url,
        "title": resolved.title,
    })


# Stream the media bytes through this server
@app.route('/proxy-download', methods=['GET'])
def proxy_download():
    try:
        return relay.relay(request.args.get("url"), request.args.get("title"))
    except ServiceError as e:
        logger.error("Proxy download error: %s (%s)", e.message, e.details or "no details")
        return e.message, e.status, {"Content-Type": "text/plain; charset=utf-8"}
    except Exception:
        logger.exception("Unexpected error in /proxy-download")
        return "Error during video download.", 500, {"Content-Type": "text/plain; charset=utf-8"}


if __name__ == "__main__":
    logger.info("Server is running on http://%s:%s", config.HOST, config.PORT)
    app.run(host=config.HOST, port=config.PORT, threaded=True)
