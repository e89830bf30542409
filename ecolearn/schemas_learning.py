"""
Pydantic schemas for modules, lesson progress and quizzes
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List


MODULE_CATEGORIES = [
    "Green Habits",
    "Global Warming",
    "Biodiversity",
    "Sustainable Development",
    "Renewable Energy",
    "Waste Management",
]


# ============= MODULE SCHEMAS =============

class Lesson(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1, description="Minutes")
    order: int = Field(..., ge=1)


class ModuleCreate(BaseModel):
    """Schema for creating a learning module"""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: str = Field(..., description=f"One of: {', '.join(MODULE_CATEGORIES)}")
    lessons: List[Lesson] = Field(default_factory=list)
    points: int = Field(default=0, ge=0, description="Points awarded on completion")
    badge: Optional[str] = None
    isActive: bool = True

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in MODULE_CATEGORIES:
            raise ValueError(f"Invalid category '{v}'. Must be one of: {', '.join(MODULE_CATEGORIES)}")
        return v


class ModuleUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    lessons: Optional[List[Lesson]] = None
    points: Optional[int] = Field(default=None, ge=0)
    badge: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in MODULE_CATEGORIES:
            raise ValueError(f"Invalid category '{v}'. Must be one of: {', '.join(MODULE_CATEGORIES)}")
        return v


class LessonProgressRequest(BaseModel):
    lessonIndex: int = Field(..., ge=0)
    isCompleted: bool = True


# ============= QUIZ SCHEMAS =============

class Question(BaseModel):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correctAnswer: int = Field(..., ge=0)
    points: int = Field(default=10, ge=0)

    @model_validator(mode='after')
    def validate_answer_index(self):
        if self.correctAnswer >= len(self.options):
            raise ValueError("correctAnswer must be the index of one of the options")
        return self


class QuizCreate(BaseModel):
    """Schema for creating a quiz, optionally attached to a module"""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    module: Optional[str] = Field(default=None, description="Module id the quiz belongs to")
    questions: List[Question] = Field(..., min_length=1)
    timeLimit: int = Field(default=10, ge=1, description="Minutes")
    requiresModuleCompletion: bool = False
    isActive: bool = True


class QuizUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    questions: Optional[List[Question]] = None
    timeLimit: Optional[int] = Field(default=None, ge=1)
    requiresModuleCompletion: Optional[bool] = None
    isActive: Optional[bool] = None


class QuizAnswer(BaseModel):
    questionIndex: int = Field(..., ge=0)
    answerIndex: int


class QuizSubmission(BaseModel):
    answers: List[QuizAnswer] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class DailyQuestionSubmission(BaseModel):
    quizId: str
    answerIndex: int
