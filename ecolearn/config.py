"""
Configuration settings for EcoLearn Service
"""
from functools import lru_cache
from typing import Optional, List
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # App
    APP_NAME: str = "EcoLearn API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"
    
    # AWS
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None  # Only for LocalStack, ECS uses IAM roles
    AWS_SECRET_ACCESS_KEY: Optional[str] = None  # Only for LocalStack, ECS uses IAM roles
    
    # DynamoDB
    DYNAMODB_ENDPOINT: Optional[str] = None  # None uses AWS, set for LocalStack
    DYNAMODB_USERS_TABLE: str = "ecolearn-dev-users"
    DYNAMODB_MODULES_TABLE: str = "ecolearn-dev-modules"
    DYNAMODB_MODULE_PROGRESS_TABLE: str = "ecolearn-dev-module-progress"
    DYNAMODB_QUIZZES_TABLE: str = "ecolearn-dev-quizzes"
    DYNAMODB_QUIZ_ATTEMPTS_TABLE: str = "ecolearn-dev-quiz-attempts"
    DYNAMODB_CHALLENGES_TABLE: str = "ecolearn-dev-challenges"
    DYNAMODB_REWARDS_TABLE: str = "ecolearn-dev-rewards"
    DYNAMODB_REDEMPTIONS_TABLE: str = "ecolearn-dev-redemptions"
    DYNAMODB_EVENTS_TABLE: str = "ecolearn-dev-events"
    DYNAMODB_SURVEYS_TABLE: str = "ecolearn-dev-surveys"
    DYNAMODB_REVIEWS_TABLE: str = "ecolearn-dev-reviews"
    DYNAMODB_ECO_PINS_TABLE: str = "ecolearn-dev-eco-pins"
    DYNAMODB_PIN_REQUESTS_TABLE: str = "ecolearn-dev-pin-requests"
    DYNAMODB_OTP_TABLE: str = "ecolearn-dev-otp-codes"
    
    # Authentication
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 30
    OTP_EXPIRE_MINUTES: int = 10
    
    # Admin provisioning (scripts/create_admin.py)
    ADMIN_NAME: str = "Admin"
    ADMIN_EMAIL: str = "admin@ecolearn.local"
    ADMIN_PASSWORD: Optional[str] = None
    
    # Gamification
    DAILY_QUESTION_POINTS: int = 5
    DEFAULT_QUESTION_POINTS: int = 10
    DEFAULT_CHALLENGE_REWARD: int = 100
    LEADERBOARD_PAGE_SIZE: int = 10
    SCHOOL_LEADERBOARD_SIZE: int = 10
    ACTIVE_STUDENT_DAYS: int = 30
    
    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    
    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Returns cached settings instance (singleton)"""
    return Settings()
