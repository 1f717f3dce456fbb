from rest_framework.routers import DefaultRouter

from .views import CommentViewSet

app_name = "comments"

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"comments", CommentViewSet, basename="comments")

urlpatterns = router.urls
