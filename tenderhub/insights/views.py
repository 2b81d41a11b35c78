import logging
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from .models import AiInsight
from .serializers import AiInsightSerializer
from .engine import generate_insights_for_tender
from tenderhub.tenders.models import Tender
from tenderhub.bidding.models import Bidder
from tenderhub.core.utils import create_audit_log

logger = logging.getLogger('tenderhub.insights')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def ai_insight_list_create(request):
    """List insights newest first (filters: type, severity, tender, bidder) or record one"""
    if request.method == 'GET':
        queryset = AiInsight.objects.select_related('tender', 'bidder')

        insight_type = request.query_params.get('type', None)
        severity = request.query_params.get('severity', None)
        tender_id = request.query_params.get('tender', None)
        bidder_id = request.query_params.get('bidder', None)

        if insight_type:
            queryset = queryset.filter(type=insight_type)
        if severity:
            queryset = queryset.filter(severity=severity)
        if tender_id:
            queryset = queryset.filter(tender_id=tender_id)
        if bidder_id:
            queryset = queryset.filter(bidder_id=bidder_id)

        serializer = AiInsightSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = AiInsightSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def ai_insight_detail(request, pk):
    """Retrieve or delete an insight"""
    insight = get_object_or_404(AiInsight.objects.select_related('tender', 'bidder'), pk=pk)

    if request.method == 'GET':
        serializer = AiInsightSerializer(insight)
        return Response(serializer.data)
    else:  # DELETE
        insight.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_ai_insights(request, pk):
    """Insights attached to a tender"""
    tender = get_object_or_404(Tender, pk=pk)
    insights = tender.ai_insights.select_related('bidder')
    return Response(AiInsightSerializer(insights, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bidder_ai_insights(request, pk):
    """Insights attached to a bidder"""
    bidder = get_object_or_404(Bidder, pk=pk)
    insights = bidder.ai_insights.select_related('tender')
    return Response(AiInsightSerializer(insights, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def tender_ai_insights_generate(request, pk):
    """Run the insight rules for a tender, replacing its previously generated insights"""
    tender = get_object_or_404(Tender, pk=pk)
    insights, scores = generate_insights_for_tender(tender)

    create_audit_log(
        request=request,
        action='insight_generate',
        model_name='Tender',
        object_id=tender.id,
        object_name=tender.title,
        changes={'insights': len(insights), 'scored_bids': len(scores)},
    )
    logger.info(f"Insights regenerated for tender {tender.id} by {request.user.username}")

    return Response({
        'insights': AiInsightSerializer(insights, many=True).data,
        'scores': {str(bid_id): score for bid_id, score in scores.items()},
    }, status=status.HTTP_201_CREATED)
