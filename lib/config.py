import aiohttp
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()

class Settings(BaseSettings):
    # Twilio settings
    twilio_account_sid: str = ''
    twilio_auth_token: str = ''

    # AssemblyAI settings
    assemblyai_api_key: str = ''
    assemblyai_base_url: str = 'https://api.assemblyai.com/v2'
    transcription_poll_interval: float = 3.0
    transcription_max_polls: int = 100

    # Roboflow settings
    roboflow_api_key: str = ''
    roboflow_model_id: str = ''
    roboflow_model_version: str = ''
    roboflow_base_url: str = 'https://detect.roboflow.com'

    # OpenRouter settings
    openrouter_api_key: str = ''
    openrouter_base_url: str = 'https://openrouter.ai/api/v1'
    openrouter_model: str = 'deepseek/deepseek-r1'

    # Webhook settings
    port: int = 3000
    reply_delay: float = 1.0
    follow_up_delay: float = 1.5
    log_level: str = 'INFO'

    @property
    def twilio_basic_auth(self) -> aiohttp.BasicAuth:
        return aiohttp.BasicAuth(
            login=self.twilio_account_sid,
            password=self.twilio_auth_token
        )

    @property
    def detection_url(self) -> str:
        return f"{self.roboflow_base_url}/{self.roboflow_model_id}/{self.roboflow_model_version}"

def get_settings() -> Settings:
    return Settings()
