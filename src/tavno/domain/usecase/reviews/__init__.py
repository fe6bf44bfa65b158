from tavno.domain.usecase.reviews.submit_review import SubmitReview

__all__ = ["SubmitReview"]
