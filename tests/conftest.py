"""Point the app at an in-memory database before anything imports campsite_api."""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="campsite-media-")
os.environ["MAILGUN_API_KEY"] = ""
os.environ["MAILGUN_DOMAIN"] = ""
os.environ["INQUIRY_RATE_LIMIT_MAX"] = "5"
