from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounts.api import (
    AdminCreateView,
    AdminLoginView,
    AdminUserRoleView,
    CurrentUserView,
    LoginView,
    LogoutView,
    RegisterView,
    VendorLoginView,
    VendorRegisterView,
)
from bookings.api import BookingViewSet
from events.api import EventTaskViewSet, EventViewSet
from payments.api import (
    CheckoutBookingView,
    CheckoutVerifyView,
    PaymentViewSet,
    StripePublishableKeyView,
    StripeWebhookView,
    UserPaymentListView,
)
from recommendations.api import EventRecommendationView, VendorSuggestionView
from reports.api import AdminBookingListView, AdminEventListView, AdminStatsView, AdminUserListView
from vendors.api import (
    AdminVendorVerifyView,
    VendorBookingListView,
    VendorProfileView,
    VendorSetupView,
    VendorViewSet,
)

router = DefaultRouter(trailing_slash=False)
router.register(r"events", EventViewSet, basename="event")
router.register(r"tasks", EventTaskViewSet, basename="task")
router.register(r"vendors", VendorViewSet, basename="vendor")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"payments", PaymentViewSet, basename="payment")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/register", RegisterView.as_view(), name="auth-register"),
    path("api/auth/login", LoginView.as_view(), name="auth-login"),
    path("api/auth/logout", LogoutView.as_view(), name="auth-logout"),
    path("api/auth/user", CurrentUserView.as_view(), name="auth-user"),
    path("api/auth/vendor/register", VendorRegisterView.as_view(), name="auth-vendor-register"),
    path("api/auth/vendor/login", VendorLoginView.as_view(), name="auth-vendor-login"),
    path("api/auth/admin/login", AdminLoginView.as_view(), name="auth-admin-login"),
    path("api/vendor/profile", VendorProfileView.as_view(), name="vendor-profile"),
    path("api/vendor/setup", VendorSetupView.as_view(), name="vendor-setup"),
    path("api/vendor/bookings", VendorBookingListView.as_view(), name="vendor-bookings"),
    path("api/checkout/booking", CheckoutBookingView.as_view(), name="checkout-booking"),
    path("api/checkout/verify", CheckoutVerifyView.as_view(), name="checkout-verify"),
    path("api/user/payments", UserPaymentListView.as_view(), name="user-payments"),
    path("api/stripe/publishable-key", StripePublishableKeyView.as_view(), name="stripe-publishable-key"),
    path("api/stripe/webhook/<uuid:webhook_uuid>", StripeWebhookView.as_view(), name="stripe-webhook"),
    path("api/ai/recommendations", EventRecommendationView.as_view(), name="ai-recommendations"),
    path("api/ai/vendor-suggestions", VendorSuggestionView.as_view(), name="ai-vendor-suggestions"),
    path("api/admin/create", AdminCreateView.as_view(), name="admin-create"),
    path("api/admin/stats", AdminStatsView.as_view(), name="admin-stats"),
    path("api/admin/users", AdminUserListView.as_view(), name="admin-users"),
    path("api/admin/users/<int:user_id>/role", AdminUserRoleView.as_view(), name="admin-user-role"),
    path("api/admin/events", AdminEventListView.as_view(), name="admin-events"),
    path("api/admin/bookings", AdminBookingListView.as_view(), name="admin-bookings"),
    path("api/admin/vendors/<int:vendor_id>/verify", AdminVendorVerifyView.as_view(), name="admin-vendor-verify"),
    path("api/", include(router.urls)),
]
