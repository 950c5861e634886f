from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import (
    AuthErrorSerializer,
    AuthResponseSerializer,
    UserLoginSerializer,
    UserRegistrationSerializer,
    UserSerializer,
)
from .services import (
    AccountsServiceError,
    InactiveAccountError,
    authenticate_user,
    register_user,
)


def _token_response(user, message, status_code=status.HTTP_200_OK):
    """Profile plus a fresh JWT pair."""
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        },
    }, status=status_code)


def _error_response(error, status_code):
    return Response({'error': error.message, 'code': error.code}, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: AuthResponseSerializer, 400: AuthErrorSerializer},
    description="Create an account for saving bills and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Create an account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        user = register_user(
            email=data['email'],
            password=data['password'],
            full_name=data['full_name'],
        )
    except AccountsServiceError as e:
        return _error_response(e, status.HTTP_400_BAD_REQUEST)

    return _token_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        401: AuthErrorSerializer,
        403: AuthErrorSerializer,
    },
    description="Sign in with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Sign in."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InactiveAccountError as e:
        return _error_response(e, status.HTTP_403_FORBIDDEN)
    except AccountsServiceError as e:
        return _error_response(e, status.HTTP_401_UNAUTHORIZED)

    return _token_response(user, 'Login successful')


@extend_schema(
    responses={200: UserSerializer},
    description="Profile of the signed-in user.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user(request):
    return Response(UserSerializer(request.user).data)
