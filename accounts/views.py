import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .credentials import CredentialStoreError
from .serializers import AdminUserSerializer, LoginSerializer
from .tokens import InvalidCredentials, get_auth_gateway

logger = logging.getLogger(__name__)


class LoginView(APIView):
    """
    Exchange admin username/password for a bearer token.
    No authentication required.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    mobile = False

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'success': False, 'message': 'Username and password are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            issued = get_auth_gateway().login(
                serializer.validated_data['username'],
                serializer.validated_data['password'],
                mobile=self.mobile,
            )
        except InvalidCredentials:
            return Response(
                {'success': False, 'message': 'Invalid credentials'},
                status=status.HTTP_401_UNAUTHORIZED
            )
        except CredentialStoreError:
            logger.exception("Login failed reading admin credentials")
            return Response(
                {'success': False, 'message': 'Server error during authentication'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(self.get_response_data(issued), status=status.HTTP_200_OK)

    def get_response_data(self, issued):
        return {'success': True, 'token': issued.token}


class AdminLoginView(LoginView):
    """
    Admin console login.

    POST /api/admin/login

    Returns a token valid for 24 hours.
    """
    mobile = False


class MobileLoginView(LoginView):
    """
    Mobile client login.

    POST /api/mobile/login

    Returns a 7-day token with role/isMobile claims and the admin profile.
    """
    mobile = True

    def get_response_data(self, issued):
        data = super().get_response_data(issued)
        data['user'] = AdminUserSerializer({
            'username': issued.username,
            'email': issued.email,
            'role': issued.role,
        }).data
        return data
