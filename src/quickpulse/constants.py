"""
Protocol constants shared by the transport and the reporting protocol.
"""

# Request headers
TRANSMISSION_TIME_HEADER = "x-ms-qps-transmission-time"
INSTANCE_NAME_HEADER = "x-ms-qps-instance-name"
STREAM_ID_HEADER = "x-ms-qps-stream-id"
MACHINE_NAME_HEADER = "x-ms-qps-machine-name"

# Sent on requests and read back from responses
CONFIGURATION_ETAG_HEADER = "x-ms-qps-configuration-etag"

# Response headers
SUBSCRIBED_HEADER = "x-ms-qps-subscribed"

# Relative paths under the service URI
PING_PATH = "ping"
SUBMIT_PATH = "post"

DEFAULT_SERVICE_ENDPOINT = "https://rt.services.visualstudio.com/QuickPulseService.svc"
DEFAULT_TIMEOUT_SECONDS = 3.0

# Upper bound on the top-CPU process list reported per sample
TOP_CPU_MAX_PROCESSES = 5

# Largest slice of the response body read at once
RESPONSE_READ_CHUNK_SIZE = 8192
