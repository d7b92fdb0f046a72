import os
from dotenv import load_dotenv

# Load .env so GOOGLE_APPLICATION_CREDENTIALS and GOOGLE_CLOUD_PROJECT work
load_dotenv()

PROJECT_ID = os.getenv('GOOGLE_CLOUD_PROJECT')
EXPORT_DIR = os.getenv('DSADMIN_EXPORT_DIR', 'exports')
PAGE_SIZE = int(os.getenv('DSADMIN_PAGE_SIZE', '1000'))
DELETE_BATCH_SIZE = int(os.getenv('DSADMIN_DELETE_BATCH_SIZE', '500'))
LOG_LEVEL = os.getenv('DSADMIN_LOG_LEVEL', 'INFO')
