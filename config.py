import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    HOMEOWNER_API_BASE_URL = data.get(
        "HOMEOWNER_API_BASE_URL", "http://localhost:5001/api"
    )
    RENTER_INVESTOR_API_BASE_URL = data.get(
        "RENTER_INVESTOR_API_BASE_URL", "http://localhost:5000/api"
    )
    HTTP_TIMEOUT_SECONDS = float(data.get("HTTP_TIMEOUT_SECONDS", 10))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    LOGIN_OTP_EXPIRY_SECONDS = int(data.get("LOGIN_OTP_EXPIRY_SECONDS", 60))
    REGISTRATION_OTP_EXPIRY_SECONDS = int(
        data.get("REGISTRATION_OTP_EXPIRY_SECONDS", 120)
    )
    FORGOT_PASSWORD_OTP_EXPIRY_SECONDS = int(
        data.get("FORGOT_PASSWORD_OTP_EXPIRY_SECONDS", 60)
    )
    OTP_RESEND_COOLDOWN_SECONDS = int(data.get("OTP_RESEND_COOLDOWN_SECONDS", 60))
    DISPOSABLE_EMAIL_DOMAINS = data.get(
        "DISPOSABLE_EMAIL_DOMAINS",
        [
            "10minutemail.com",
            "guerrillamail.com",
            "mailinator.com",
            "zoaxe.com",
            "zoemail.org",
            "zomg.info",
        ],
    )
