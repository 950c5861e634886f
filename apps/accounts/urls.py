from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # POST /api/auth/register/   - Create account, returns JWT pair
    # POST /api/auth/login/      - Sign in, returns JWT pair
    # GET  /api/auth/user/       - Signed-in user's profile
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('user/', views.current_user, name='current-user'),
]
