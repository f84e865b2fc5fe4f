# company/api/views.py

from django.db.models import Q
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from company.api.serializers import CompanyProfileSerializer, StaffMemberSerializer
from company.models import CompanyProfile, StaffMember


class CompanyProfileView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CompanyProfileSerializer

    @extend_schema(tags=["company"], responses=CompanyProfileSerializer)
    def get(self, request):
        profile = CompanyProfile.load()
        return Response(self.get_serializer(profile).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["company"],
        request=CompanyProfileSerializer,
        responses=CompanyProfileSerializer,
    )
    def put(self, request):
        profile = CompanyProfile.load()
        s = self.get_serializer(profile, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        profile = s.save()
        return Response(self.get_serializer(profile).data, status=status.HTTP_200_OK)


class StaffMemberListCreateView(GenericAPIView):
    """
    Staff list, ordered by name.
    ?search= matches name, email or contact number.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = StaffMemberSerializer

    @extend_schema(tags=["company"], responses=StaffMemberSerializer(many=True))
    def get(self, request):
        qs = StaffMember.objects.order_by("name")
        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(contact_number__icontains=search)
            )
        return Response(StaffMemberSerializer(qs, many=True).data)

    @extend_schema(
        tags=["company"],
        request=StaffMemberSerializer,
        responses={201: StaffMemberSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        member = s.save()
        return Response(StaffMemberSerializer(member).data, status=status.HTTP_201_CREATED)


class StaffMemberDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StaffMemberSerializer

    def _get(self, staff_id):
        try:
            return StaffMember.objects.get(id=staff_id)
        except StaffMember.DoesNotExist:
            return None

    @extend_schema(tags=["company"], responses=StaffMemberSerializer)
    def get(self, request, staff_id):
        member = self._get(staff_id)
        if member is None:
            return Response({"detail": "Staff member not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(StaffMemberSerializer(member).data)

    @extend_schema(tags=["company"], request=StaffMemberSerializer, responses=StaffMemberSerializer)
    def put(self, request, staff_id):
        member = self._get(staff_id)
        if member is None:
            return Response({"detail": "Staff member not found"}, status=status.HTTP_404_NOT_FOUND)
        s = self.get_serializer(member, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        member = s.save()
        return Response(StaffMemberSerializer(member).data)

    @extend_schema(tags=["company"])
    def delete(self, request, staff_id):
        member = self._get(staff_id)
        if member is None:
            return Response({"detail": "Staff member not found"}, status=status.HTTP_404_NOT_FOUND)
        member.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
